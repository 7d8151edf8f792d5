# Purchase Order API end-to-end test suite
#
# API tests (pytest + httpx) drive the app in-process over WSGI.
# Backend unit and route tests live in backend/tests.
