# permissions/__init__.py
