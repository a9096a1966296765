"""
Package Analyzer — Early diagnostics and inventory of typewriter packages.

This module provides lightweight analysis of Package objects:
    - Declaration and field inventory
    - References to types that are never declared
    - Recursive type references
    - Type nesting metrics

IMPORTANT: This is read-only. It does NOT modify the package.
It analyzes the package as the backends will see it (after mapping).
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from typewriter.mapper import map_package
from typewriter.model import Package
from typewriter.types import TypeRef, Basic, Array, Map, Struct

# Names every backend renders natively
BUILTIN_NAMES = {"string", "number", "boolean", "any", "Object", "object"}


@dataclass
class TypeMetrics:
    """Metrics about a single type tree."""
    depth: int = 0
    references: Set[str] = field(default_factory=set)


def _analyze_type(ref: TypeRef | None) -> TypeMetrics:
    """Recursively analyze a type tree."""
    if ref is None:
        return TypeMetrics()

    if isinstance(ref, Basic):
        metrics = TypeMetrics(depth=1)
        if ref.name not in BUILTIN_NAMES:
            metrics.references.add(ref.name)
        return metrics

    if isinstance(ref, Array):
        inner = _analyze_type(ref.element)
        return TypeMetrics(depth=1 + inner.depth, references=inner.references)

    if isinstance(ref, Map):
        key = _analyze_type(ref.key)
        value = _analyze_type(ref.value)
        return TypeMetrics(depth=1 + max(key.depth, value.depth), references=key.references | value.references)

    if isinstance(ref, Struct):
        metrics = TypeMetrics(depth=1, references=set(ref.embedded))
        for f in ref.fields:
            inner = _analyze_type(f.type)
            metrics.depth = max(metrics.depth, 1 + inner.depth)
            metrics.references.update(inner.references)
        return metrics

    # Opaque objects reference nothing
    return TypeMetrics(depth=1)


def _find_cycle(graph: Dict[str, Set[str]], start: str, visited: Set[str],
                rec_stack: Set[str], path: List[str]) -> Optional[List[str]]:
    """DFS to find a cycle starting from a node."""
    visited.add(start)
    rec_stack.add(start)
    path.append(start)

    for neighbor in sorted(graph.get(start, ())):
        if neighbor not in visited:
            cycle = _find_cycle(graph, neighbor, visited, rec_stack, path[:])
            if cycle:
                return cycle
        elif neighbor in rec_stack:
            cycle_start_idx = path.index(neighbor)
            return path[cycle_start_idx:] + [neighbor]

    rec_stack.remove(start)
    return None


@dataclass
class PackageReport:
    """Analysis report for a package."""

    package_name: str
    total_declarations: int = 0
    total_structs: int = 0
    strict_structs: int = 0
    total_fields: int = 0
    commented_declarations: int = 0

    # References
    reference_counts: Dict[str, int] = field(default_factory=dict)
    undefined_references: Set[str] = field(default_factory=set)
    unreferenced_declarations: Set[str] = field(default_factory=set)

    # Graph properties
    has_cycles: bool = False
    cycle_example: Optional[List[str]] = None

    # Nesting
    max_type_depth: int = 0

    # Warnings and flags
    warnings: List[str] = field(default_factory=list)

    def add_warning(self, msg: str) -> None:
        """Add a warning to the report."""
        if msg not in self.warnings:
            self.warnings.append(msg)


def analyze_package(package: Package) -> PackageReport:
    """
    Perform analysis of a Package.

    Checks for:
    - References to undeclared types
    - Recursive references
    - Nesting depth

    Returns a PackageReport with metrics and warnings.
    """
    mapped = map_package(package)
    report = PackageReport(package_name=package.name)
    report.total_declarations = len(mapped.declarations)

    declared = {d.name for d in mapped.declarations}
    graph: Dict[str, Set[str]] = {}
    counts: Dict[str, int] = defaultdict(int)

    for decl in mapped.declarations:
        if decl.comment:
            report.commented_declarations += 1
        if isinstance(decl.type, Struct):
            report.total_structs += 1
            report.total_fields += len(decl.type.fields)
            if decl.type.strict:
                report.strict_structs += 1

        metrics = _analyze_type(decl.type)
        report.max_type_depth = max(report.max_type_depth, metrics.depth)
        graph[decl.name] = metrics.references
        for name in metrics.references:
            counts[name] += 1

    report.reference_counts = dict(counts)
    report.undefined_references = set(counts) - declared
    report.unreferenced_declarations = declared - set(counts)

    visited: Set[str] = set()
    for name in sorted(graph):
        if name not in visited:
            cycle = _find_cycle(graph, name, visited, set(), [])
            if cycle:
                report.has_cycles = True
                report.cycle_example = cycle
                break

    if report.undefined_references:
        report.add_warning(
            f"Undefined type references: {', '.join(sorted(report.undefined_references))}"
        )

    if report.has_cycles:
        report.add_warning(
            f"Recursive type reference: {' -> '.join(report.cycle_example)}"
        )

    if report.max_type_depth > 5:
        report.add_warning(
            f"Deeply nested type: max depth {report.max_type_depth}"
        )

    return report
