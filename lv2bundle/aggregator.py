"""
Bundle Aggregator - Loads and dumps whole LV2 bundles.

This module ties the pipeline together:

    documents --TurtleParser--> ParsedDocument (per document)
              --GraphIndex----> merged statements
              --SchemaMapper--> draft Bundle + MappingWarnings
              --BundleValidator--> ValidationResult
              --> BundleLoadResult

and, in the other direction, plans the document split for a bundle and
renders it with the BundleSerializer.

Failures are isolated per document: a document with a syntax error is
reported and left out of the merged graph while every other document is
still mapped, so the draft bundle is as complete as the input allows.
"""

import copy
import logging
from collections.abc import Mapping as MappingABC
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Mapping, Optional, Set, Tuple, Union

from rdflib import RDF, URIRef

from .common.errors import BundleError, MissingDocumentError, TurtleSyntaxError
from .config import DEFAULT_CONFIG, PipelineConfig
from .converters.bundle_serializer import BundleSerializer
from .converters.schema_mapper import SchemaMapper
from .converters.uri_utils import URIUtils
from .core.validators import BundleValidator
from .formats.turtle.parser import TurtleParser
from .graph.index import GraphIndex
from .shared.models.bundle import Bundle, Plugin
from .shared.models.conversion import BundleLoadResult, DocumentPlan
from .shared.models.statements import ParsedDocument
from .vocabulary.vocabulary import STANDARD_VOCABULARY, Vocabulary

logger = logging.getLogger(__name__)

DocumentData = Union[bytes, bytearray, str]


class BundleAggregator:
    """
    Loads a bundle from its documents and dumps it back.

    Example:
        >>> aggregator = BundleAggregator()
        >>> result = aggregator.load({"manifest.ttl": manifest, "amp.ttl": data}, "file:///amp.lv2/")
        >>> bundle = result.raise_for_errors()
        >>> files = aggregator.dump(bundle)
        >>> sorted(files)
        ['amp.ttl', 'manifest.ttl']
    """

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        vocabulary: Vocabulary = STANDARD_VOCABULARY,
    ):
        self.config = config or DEFAULT_CONFIG
        self.vocabulary = vocabulary
        self.parser = TurtleParser(self.config.large_document_bytes)
        self.mapper = SchemaMapper(vocabulary)
        self.validator = BundleValidator(self.config, vocabulary)
        self.serializer = BundleSerializer(vocabulary)

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def load(
        self,
        documents: Mapping[str, DocumentData],
        base_uri: Optional[str] = None,
    ) -> BundleLoadResult:
        """
        Load a bundle from named Turtle documents.

        Args:
            documents: Document name (relative to the bundle) to content
            base_uri: Bundle directory IRI; defaults to the configured base

        Returns:
            BundleLoadResult with the valid bundle, or the draft and every
            problem found

        Raises:
            TypeError: If documents is not a mapping of names to bytes or str
            ValueError: If the base IRI is empty
        """
        if not isinstance(documents, MappingABC):
            raise TypeError(f"documents must be a mapping, got {type(documents).__name__}")
        for name, data in documents.items():
            if not isinstance(name, str) or not name:
                raise TypeError(f"Document names must be non-empty strings, got {name!r}")
            if not isinstance(data, (bytes, bytearray, str)):
                raise TypeError(f"Document {name} must be bytes or str, got {type(data).__name__}")

        base = URIUtils.normalize_base(base_uri if base_uri is not None else self.config.default_base_uri)
        manifest_name = self.config.manifest_name
        logger.info(f"Loading bundle {base} from {len(documents)} document(s)")

        parsed, errors = self._parse_all(documents, base)
        if manifest_name not in documents:
            logger.error(f"Bundle {base} has no {manifest_name}")
            errors[manifest_name] = MissingDocumentError(
                f"Bundle has no {manifest_name}", document=manifest_name,
            )

        index = GraphIndex()
        prefixes: Dict[str, str] = {}
        for name in _ordered_names(parsed, manifest_name):
            document = parsed[name]
            index.insert(document)
            for prefix, namespace in document.prefixes.items():
                prefixes.setdefault(prefix, namespace)

        manifest = parsed.get(manifest_name)
        entry_points = manifest.typed_subjects(RDF.type) if manifest is not None else []

        mapping = self.mapper.map(index, entry_points, base, prefixes)
        validation = self.validator.validate(mapping.bundle)

        result = BundleLoadResult(
            draft=mapping.bundle,
            document_errors=errors,
            warnings=mapping.warnings,
            validation=validation,
            statement_count=len(index),
        )
        if not errors and not mapping.warnings and validation.is_valid:
            result.bundle = mapping.bundle
            logger.info(f"Loaded bundle {base}: {len(mapping.bundle.plugins)} plugin(s)")
        else:
            logger.warning(
                f"Bundle {base} is invalid: {len(errors)} document error(s), "
                f"{len(mapping.warnings)} mapping warning(s), {validation.error_count} validation error(s)"
            )
        return result

    def _parse_all(
        self,
        documents: Mapping[str, DocumentData],
        base: str,
    ) -> Tuple[Dict[str, ParsedDocument], Dict[str, BundleError]]:
        names = sorted(documents)
        jobs = [(name, documents[name], URIUtils.document_uri(base, name)) for name in names]

        if self.config.max_workers > 1 and len(jobs) > 1:
            with ThreadPoolExecutor(max_workers=min(self.config.max_workers, len(jobs))) as executor:
                outcomes = list(executor.map(self._parse_one, jobs))
        else:
            outcomes = [self._parse_one(job) for job in jobs]

        parsed: Dict[str, ParsedDocument] = {}
        errors: Dict[str, BundleError] = {}
        for name, outcome in zip(names, outcomes):
            if isinstance(outcome, TurtleSyntaxError):
                errors[name] = outcome
            else:
                parsed[name] = outcome
        return parsed, errors

    def _parse_one(self, job: Tuple[str, DocumentData, str]) -> Union[ParsedDocument, TurtleSyntaxError]:
        name, data, document_base = job
        try:
            return self.parser.parse(data, document_base, name)
        except TurtleSyntaxError as e:
            logger.error(f"Skipping document {name}: {e}")
            return e

    # -------------------------------------------------------------------------
    # Dumping
    # -------------------------------------------------------------------------

    def plan(self, bundle: Bundle) -> DocumentPlan:
        """
        Decide which document each entity is written to.

        A plugin's detail goes to its first in-bundle rdfs:seeAlso
        document, or to the manifest when it has none. A project goes
        with the first plugin that references it.
        """
        base = URIUtils.normalize_base(bundle.base_uri)
        manifest_name = self.config.manifest_name
        plan = DocumentPlan(manifest=manifest_name)

        for plugin in bundle.plugins:
            name = _data_document(plugin, base, manifest_name)
            if name is not None:
                plan.plugin_documents[plugin.uri] = name

        project_uris = {project.uri for project in bundle.projects}
        for plugin in bundle.plugins:
            ref = plugin.project
            if ref in project_uris and ref not in plan.project_documents:
                plan.project_documents[ref] = plan.document_for_plugin(plugin.uri)
        return plan

    def apply_default_layout(self, bundle: Bundle) -> Bundle:
        """
        Give every plugin without an in-bundle data document its own one.

        Returns:
            A copy of the bundle; the input is not modified
        """
        base = URIUtils.normalize_base(bundle.base_uri)
        manifest_name = self.config.manifest_name
        laid_out = copy.deepcopy(bundle)

        used: Set[str] = {manifest_name}
        pending: List[Plugin] = []
        for plugin in laid_out.plugins:
            name = _data_document(plugin, base, manifest_name)
            if name is None:
                pending.append(plugin)
            else:
                used.add(name)

        for position, plugin in enumerate(pending):
            stem = plugin.symbol if URIUtils.is_valid_symbol(plugin.symbol) else \
                URIUtils.sanitize_symbol(URIUtils.local_name(plugin.uri), position)
            name = f"{stem}.ttl"
            suffix = 1
            while name in used:
                name = f"{stem}_{suffix}.ttl"
                suffix += 1
            used.add(name)
            plugin.see_also.add(URIRef(URIUtils.document_uri(base, name)))
            logger.debug(f"Assigned {plugin.uri} to {name}")
        return laid_out

    def dump(self, bundle: Bundle) -> Dict[str, bytes]:
        """
        Render a bundle as Turtle documents.

        Returns:
            Document name to UTF-8 bytes

        Raises:
            SerializationError: If a field value cannot be represented
        """
        return self.serializer.serialize(bundle, self.plan(bundle))


def _ordered_names(parsed: Mapping[str, ParsedDocument], manifest_name: str) -> List[str]:
    names = sorted(n for n in parsed if n != manifest_name)
    if manifest_name in parsed:
        names.insert(0, manifest_name)
    return names


def _data_document(plugin: Plugin, base: str, manifest_name: str) -> Optional[str]:
    for see_also in sorted(plugin.see_also, key=str):
        name = URIUtils.document_name(base, see_also)
        if name is not None and name != manifest_name:
            return name
    return None


def load_bundle(
    documents: Mapping[str, DocumentData],
    base_uri: Optional[str] = None,
    config: Optional[PipelineConfig] = None,
) -> BundleLoadResult:
    """
    Convenience function to load a bundle.

    Args:
        documents: Document name to content
        base_uri: Bundle directory IRI
        config: Pipeline configuration (defaults when omitted)

    Returns:
        BundleLoadResult
    """
    return BundleAggregator(config).load(documents, base_uri)


def dump_bundle(bundle: Bundle, config: Optional[PipelineConfig] = None) -> Dict[str, bytes]:
    """
    Convenience function to dump a bundle.

    Args:
        bundle: The bundle to write
        config: Pipeline configuration (defaults when omitted)

    Returns:
        Document name to UTF-8 bytes
    """
    return BundleAggregator(config).dump(bundle)
