# rollodex/auth/__init__.py
