# rollodex/relationships/__init__.py
