# Overview: Flask extension instances for the database connection pool.

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()
