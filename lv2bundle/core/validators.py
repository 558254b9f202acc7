"""
Bundle validation.

This module checks a typed bundle against the structural rules of the
LV2 core and the recognized extensions. Validation is exhaustive: every
rule runs and every violation is recorded, so one pass reports all
problems at once.

Checks performed:
- Plugin IRIs unique within the bundle
- Plugin binary and plugin class present
- Symbols well-formed on plugins, ports, projects and port groups
- Port indices present, unique and contiguous from zero
- Port symbols present and unique
- Port direction and type classes present and consistent
- Control ranges ordered and finite, defaults inside the range
- Features and options not both required and optional
- Scale points carry a value

Usage:
    from lv2bundle.core.validators import BundleValidator

    result = BundleValidator().validate(bundle)
    if not result.is_valid:
        for issue in result.errors:
            print(issue)
"""

import logging
import math
from collections import Counter
from typing import Iterable, Optional, Set

from ..common.validation import IssueCategory, ValidationResult
from ..config import DEFAULT_CONFIG, PipelineConfig
from ..converters.uri_utils import URIUtils
from ..shared.models.bundle import (
    Bundle,
    LocalizedText,
    Number,
    Plugin,
    Port,
    PortGroupMembership,
    PortGroupsPayload,
)
from ..vocabulary.terms import (
    PORT_DIRECTION_CLASSES,
    PORT_TYPE_CLASSES,
    Extension,
    PluginClass,
    PortProperty,
)
from ..vocabulary.vocabulary import STANDARD_VOCABULARY, Vocabulary

logger = logging.getLogger(__name__)


class BundleValidator:
    """
    Validates a typed bundle.

    The validator holds no state between calls and never mutates the
    bundle it inspects.

    Example:
        >>> validator = BundleValidator(PipelineConfig(require_binary=False))
        >>> validator.validate(bundle).is_valid
        True
    """

    def __init__(
        self,
        config: PipelineConfig = DEFAULT_CONFIG,
        vocabulary: Vocabulary = STANDARD_VOCABULARY,
    ):
        self.config = config
        self.vocabulary = vocabulary

    def validate(self, bundle: Bundle) -> ValidationResult:
        """
        Validate every entity of a bundle.

        Args:
            bundle: The bundle to check

        Returns:
            ValidationResult holding every issue found
        """
        result = ValidationResult(source_path=bundle.base_uri)

        counts = Counter(str(plugin.uri) for plugin in bundle.plugins)
        for uri, count in sorted(counts.items()):
            if count > 1:
                result.add_error(
                    IssueCategory.NAME_CONFLICT,
                    f"Plugin IRI declared {count} times",
                    location=uri,
                    recommendation="Give every plugin in the bundle its own IRI",
                )

        for plugin in bundle.plugins:
            self._validate_plugin(plugin, result)

        for project in bundle.projects:
            if project.symbol is not None and not URIUtils.is_valid_symbol(project.symbol):
                result.add_error(
                    IssueCategory.INVALID_CHARACTER,
                    f"Project symbol {project.symbol!r} is not a valid LV2 symbol",
                    location=str(project.uri),
                )

        for dyn_manifest in bundle.dyn_manifests:
            if dyn_manifest.binary is None:
                result.add_error(
                    IssueCategory.MISSING_REQUIRED,
                    "Dynamic manifest has no lv2:binary",
                    location=str(dyn_manifest.uri),
                )

        result.statistics = {
            "plugins": len(bundle.plugins),
            "ports": sum(len(p.ports) for p in bundle.plugins),
            "projects": len(bundle.projects),
            "dyn_manifests": len(bundle.dyn_manifests),
            "errors": result.error_count,
            "warnings": result.warning_count,
        }

        if result.is_valid:
            logger.debug(f"Bundle {bundle.base_uri} is valid ({result.warning_count} warning(s))")
        else:
            logger.info(f"Bundle {bundle.base_uri} has {result.error_count} validation error(s)")
        return result

    # -------------------------------------------------------------------------
    # Plugins
    # -------------------------------------------------------------------------

    def _validate_plugin(self, plugin: Plugin, result: ValidationResult) -> None:
        where = str(plugin.uri)

        if plugin.binary is None and self.config.require_binary:
            result.add_error(
                IssueCategory.MISSING_REQUIRED,
                "Plugin has no lv2:binary",
                location=where,
                recommendation="Declare the plugin's shared library with lv2:binary in the manifest",
            )
        if not any(isinstance(c, PluginClass) for c in plugin.classes.known):
            result.add_error(
                IssueCategory.MISSING_REQUIRED,
                "Plugin has no recognized plugin class",
                location=where,
            )
        if plugin.symbol is not None and not URIUtils.is_valid_symbol(plugin.symbol):
            result.add_error(
                IssueCategory.INVALID_CHARACTER,
                f"Plugin symbol {plugin.symbol!r} is not a valid LV2 symbol",
                location=where,
            )
        if not plugin.names:
            result.add_warning(IssueCategory.MISSING_REQUIRED, "Plugin has no doap:name", location=where)
        self._check_short_names(plugin.short_names, where, result)

        for feature in plugin.required_features.intersection(plugin.optional_features):
            result.add_error(
                IssueCategory.MUTUAL_EXCLUSION,
                f"Feature {feature} is both required and optional",
                location=where,
            )
        options = plugin.extensions.get(Extension.OPTIONS)
        if options is not None:
            for option in options.required.intersection(options.supported):
                result.add_error(
                    IssueCategory.MUTUAL_EXCLUSION,
                    f"Option {option} is both required and supported",
                    location=where,
                )

        self._validate_port_numbering(plugin, result)
        defined_groups = self._validate_port_groups(plugin, result)
        for port in plugin.ports:
            self._validate_port(plugin, port, defined_groups, result)

    def _validate_port_numbering(self, plugin: Plugin, result: ValidationResult) -> None:
        where = str(plugin.uri)
        indices = [p.index for p in plugin.ports if p.index is not None]
        symbols = [p.symbol for p in plugin.ports if p.symbol is not None]

        for index, count in sorted(Counter(indices).items()):
            if count > 1:
                result.add_error(
                    IssueCategory.NAME_CONFLICT,
                    f"Port index {index} used by {count} ports",
                    location=where,
                )
        for symbol, count in sorted(Counter(symbols).items()):
            if count > 1:
                result.add_error(
                    IssueCategory.NAME_CONFLICT,
                    f"Port symbol {symbol!r} used by {count} ports",
                    location=where,
                )

        unique = set(indices)
        if unique and unique != set(range(len(unique))):
            result.add_error(
                IssueCategory.INVALID_STRUCTURE,
                f"Port indices {sorted(unique)} are not contiguous from 0",
                location=where,
                recommendation="Number ports 0, 1, 2, ... without gaps",
            )

    def _validate_port_groups(self, plugin: Plugin, result: ValidationResult) -> Set:
        payload = plugin.extensions.get(Extension.PORT_GROUPS)
        if not isinstance(payload, PortGroupsPayload):
            return set()
        defined = set(payload.groups)
        for group in payload.groups.values():
            if group.symbol is not None and not URIUtils.is_valid_symbol(group.symbol):
                result.add_error(
                    IssueCategory.INVALID_CHARACTER,
                    f"Port group symbol {group.symbol!r} is not a valid LV2 symbol",
                    location=str(group.uri),
                )
        for label, main in (("pg:mainInput", payload.main_input), ("pg:mainOutput", payload.main_output)):
            if main is not None and main not in defined:
                result.add_warning(
                    IssueCategory.INVALID_REFERENCE,
                    f"{label} refers to undefined port group {main}",
                    location=str(plugin.uri),
                )
        return defined

    # -------------------------------------------------------------------------
    # Ports
    # -------------------------------------------------------------------------

    def _validate_port(
        self,
        plugin: Plugin,
        port: Port,
        defined_groups: Set,
        result: ValidationResult,
    ) -> None:
        where = f"{plugin.uri} {port.label}"

        if port.index is None:
            result.add_error(IssueCategory.MISSING_REQUIRED, "Port has no lv2:index", location=where)
        elif port.index < 0:
            result.add_error(
                IssueCategory.RANGE_VIOLATION,
                f"Port index {port.index} is negative",
                location=where,
            )
        if port.symbol is None:
            result.add_error(IssueCategory.MISSING_REQUIRED, "Port has no lv2:symbol", location=where)
        elif not URIUtils.is_valid_symbol(port.symbol):
            result.add_error(
                IssueCategory.INVALID_CHARACTER,
                f"Port symbol {port.symbol!r} is not a valid LV2 symbol",
                location=where,
            )
        if not port.names:
            result.add_warning(IssueCategory.MISSING_REQUIRED, "Port has no lv2:name", location=where)
        self._check_short_names(port.short_names, where, result)

        self._check_port_classes(port, where, result)
        self._check_range(port, where, result)

        for point in sorted(port.scale_points, key=lambda sp: sorted(t.value for t in sp.labels)):
            if point.value is None:
                labels = ", ".join(sorted(t.value for t in point.labels)) or "(unlabelled)"
                result.add_error(
                    IssueCategory.MISSING_REQUIRED,
                    f"Scale point {labels} has no rdf:value",
                    location=where,
                )
            elif not _finite(point.value):
                result.add_error(
                    IssueCategory.RANGE_VIOLATION,
                    f"Scale point value {point.value} is not finite",
                    location=where,
                )

        if PortProperty.REPORTS_LATENCY in port.properties.known and not port.is_output:
            result.add_warning(
                IssueCategory.CONSTRAINT_VIOLATION,
                "lv2:reportsLatency on a port that is not an output",
                location=where,
            )

        membership = port.extensions.get(Extension.PORT_GROUPS)
        if isinstance(membership, PortGroupMembership) and membership.group not in defined_groups:
            result.add_warning(
                IssueCategory.INVALID_REFERENCE,
                f"Port refers to undefined port group {membership.group}",
                location=where,
            )

    def _check_port_classes(self, port: Port, where: str, result: ValidationResult) -> None:
        known = port.classes.known
        if known.isdisjoint(PORT_DIRECTION_CLASSES):
            result.add_error(
                IssueCategory.MISSING_REQUIRED,
                "Port is neither lv2:InputPort nor lv2:OutputPort",
                location=where,
            )
        elif PORT_DIRECTION_CLASSES <= known and not self.config.allow_bidirectional_ports:
            result.add_error(
                IssueCategory.MUTUAL_EXCLUSION,
                "Port is both an input and an output",
                location=where,
            )

        types = sorted(known & PORT_TYPE_CLASSES, key=str)
        if not types:
            message = "Port has no recognized type class"
            if port.classes.unknown:
                result.add_warning(
                    IssueCategory.UNKNOWN_CLASS,
                    message,
                    location=where,
                    details=", ".join(sorted(str(c) for c in port.classes.unknown)),
                )
            else:
                result.add_error(IssueCategory.MISSING_REQUIRED, message, location=where)
        elif len(types) > 1:
            result.add_error(
                IssueCategory.MUTUAL_EXCLUSION,
                "Port has more than one type class",
                location=where,
                details=", ".join(str(t) for t in types),
            )

    def _check_range(self, port: Port, where: str, result: ValidationResult) -> None:
        finite = True
        for label, value in (("minimum", port.minimum), ("maximum", port.maximum), ("default", port.default)):
            if value is not None and not _finite(value):
                finite = False
                result.add_error(
                    IssueCategory.RANGE_VIOLATION,
                    f"Port {label} {value} is not finite",
                    location=where,
                )
        if not finite:
            return

        low, high, default = port.minimum, port.maximum, port.default
        if low is not None and high is not None and low > high:
            result.add_error(
                IssueCategory.RANGE_VIOLATION,
                f"Port minimum {low} is greater than maximum {high}",
                location=where,
            )
            return
        if default is not None:
            if (low is not None and default < low) or (high is not None and default > high):
                result.add_error(
                    IssueCategory.RANGE_VIOLATION,
                    f"Port default {default} is outside [{_bound(low)}, {_bound(high)}]",
                    location=where,
                )

    # -------------------------------------------------------------------------
    # Shared checks
    # -------------------------------------------------------------------------

    def _check_short_names(
        self,
        short_names: Iterable[LocalizedText],
        where: str,
        result: ValidationResult,
    ) -> None:
        limit = self.config.max_short_name_length
        for text in sorted(short_names, key=lambda t: (t.lang or "", t.value)):
            if len(text.value) > limit:
                result.add_warning(
                    IssueCategory.NAME_TOO_LONG,
                    f"Short name {text.value!r} is longer than {limit} characters",
                    location=where,
                )


def _finite(value: Number) -> bool:
    return not isinstance(value, float) or math.isfinite(value)


def _bound(value: Optional[Number]) -> str:
    return "-" if value is None else str(value)
