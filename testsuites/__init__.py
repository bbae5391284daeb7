"""
Contract test suites package.

Holds the contract-testing framework (`contract_testing.framework`), the
bundled schemas, and the unit and contract test suites. Kept importable so
`run_tests.py` and the `run-contract-tests` script can load the framework.
"""
