"""
Contract testing: schema validation and schema-driven payload generation
for API tests.
"""
