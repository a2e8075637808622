# pethub/api/__init__.py
