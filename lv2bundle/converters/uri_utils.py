"""
URI Utilities - IRI parsing and LV2 symbol handling.

This module handles LV2 symbol validation, local-name extraction from
IRIs, and the mapping between bundle document names and IRIs.

LV2 symbol requirements:
- Must start with a letter or underscore
- Can contain letters, numbers, and underscores only
- Pattern: ^[_a-zA-Z][_a-zA-Z0-9]*$
"""

import logging
import re
from typing import Optional, Union
from urllib.parse import urljoin

from rdflib import URIRef

logger = logging.getLogger(__name__)

SYMBOL_PATTERN = re.compile(r'^[_a-zA-Z][_a-zA-Z0-9]*$')


class URIUtils:
    """
    Utility class for IRI parsing and symbol handling.

    Handles:
    - Validating and sanitizing LV2 symbols
    - Extracting local names from IRIs (fragment or path-based)
    - Converting between document names and IRIs under a bundle base
    """

    @staticmethod
    def is_valid_symbol(symbol: Optional[str]) -> bool:
        """
        Check if a string is a valid LV2 symbol.

        Args:
            symbol: The candidate symbol

        Returns:
            True if the symbol matches ^[_a-zA-Z][_a-zA-Z0-9]*$
        """
        if not symbol:
            return False
        return SYMBOL_PATTERN.match(symbol) is not None

    @staticmethod
    def sanitize_symbol(name: str, fallback_counter: int = 0) -> str:
        """
        Turn an arbitrary name into a valid LV2 symbol.

        Args:
            name: The name to sanitize
            fallback_counter: Counter for generating unique fallback symbols

        Returns:
            A valid symbol
        """
        cleaned = ''.join(c if (c.isascii() and c.isalnum()) or c == '_' else '_' for c in name or '')
        if not cleaned.strip('_'):
            logger.warning(f"Name produced empty symbol: {name!r}")
            return f'plugin_{fallback_counter}'
        if cleaned[0].isdigit():
            cleaned = '_' + cleaned
        return cleaned

    @staticmethod
    def local_name(uri: Union[URIRef, str, None]) -> str:
        """
        Extract the local name of an IRI (after the last '#' or '/').

        Args:
            uri: The IRI

        Returns:
            The local name, or an empty string
        """
        if uri is None:
            return ''
        uri_str = str(uri).strip().rstrip('/')
        if '#' in uri_str:
            return uri_str.rsplit('#', 1)[-1]
        if '/' in uri_str:
            return uri_str.rsplit('/', 1)[-1]
        return uri_str

    @staticmethod
    def normalize_base(base_uri: str) -> str:
        """
        Normalize a bundle base IRI so it denotes a directory.

        Raises:
            ValueError: If the base is empty
        """
        if not isinstance(base_uri, str) or not base_uri.strip():
            raise ValueError("Bundle base IRI must be a non-empty string")
        base_uri = base_uri.strip()
        return base_uri if base_uri.endswith('/') else base_uri + '/'

    @staticmethod
    def document_uri(base_uri: str, name: str) -> str:
        """IRI of a document inside the bundle."""
        return urljoin(base_uri, name)

    @staticmethod
    def document_name(base_uri: str, uri: Union[URIRef, str]) -> Optional[str]:
        """
        Name of the bundle document an IRI points to.

        Returns:
            The path relative to the base, or None when the IRI is outside
            the bundle or names the bundle directory itself
        """
        uri_str = str(uri)
        if not uri_str.startswith(base_uri):
            return None
        name = uri_str[len(base_uri):]
        if not name or '#' in name or '?' in name or name.endswith('/'):
            return None
        return name
