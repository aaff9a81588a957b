# rollodex/analytics/__init__.py
