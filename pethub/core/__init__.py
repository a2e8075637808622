# pethub/core/__init__.py
