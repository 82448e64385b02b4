"""
Output formats: RDF serialization of entities and OAI-PMH responses.
"""
