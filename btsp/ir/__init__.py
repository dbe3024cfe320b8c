"""Bootstrap intermediate representation (the BAST).

The IR is what the compiler builds from a .btsp source file and what the
debug serializer writes out. It records:
- Imports (``#import`` directives, deduplicated)
- Entities (``command ?? (args)`` lines inside the program body)
- References (program boundary line numbers plus format version tags)
"""
