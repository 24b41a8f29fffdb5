"""
Script to build the ontology tables from the Schema.org vocabulary.
"""
from schemaorg_validator.build_type_map import main

if __name__ == "__main__":
    raise SystemExit(main())
