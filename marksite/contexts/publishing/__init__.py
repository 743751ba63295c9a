"""
Publishing Context

Responsibilities:
- Builds each page's Bloom-filter search index from its rendered text
- Encrypts the rendered body of crypto pages
- Resolves the encryption password once per run

Owns: Search index construction, hashing, page encryption
Never: Parses Markdown or composes page templates
"""

from marksite.contexts.publishing.bloom_filter import BloomFilter
from marksite.contexts.publishing.encryption import decrypt_with_password, encrypt_with_password
from marksite.contexts.publishing.password import MissingPasswordError, PasswordResolver
from marksite.contexts.publishing.search_index import build_search_index

__all__ = [
    "BloomFilter",
    "build_search_index",
    "encrypt_with_password",
    "decrypt_with_password",
    "PasswordResolver",
    "MissingPasswordError",
]
