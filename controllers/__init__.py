# controllers/__init__.py
