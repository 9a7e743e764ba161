"""
salesauth tests

Unit tests for the credential store, password hasher, token issuer and
authentication service, plus API tests against the FastAPI app built by
`create_app`.
"""
