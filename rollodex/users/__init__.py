# rollodex/users/__init__.py
