# rollodex/services/__init__.py
