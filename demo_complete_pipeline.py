#!/usr/bin/env python3
"""
Complete Pipeline Demo: Go → model → Analysis → Declarations

Shows the full workflow:
1. Parse a Go source file
2. Analyze the package
3. Generate Flow and TypeScript declarations
"""

import os

from typewriter.go_parser import parse_go_file
from typewriter.analyzer import analyze_package
from typewriter.backends import generate_declarations, save_declarations, Language


def main():
    go_path = os.path.join(os.path.dirname(os.path.abspath(__file__)), "tests", "fixtures", "models.go")

    print("=" * 80)
    print("COMPLETE PIPELINE DEMO: Go → model → Analysis → Declarations")
    print("=" * 80)

    # =========================================================================
    # STEP 1: Parse Go
    # =========================================================================
    print("\n1. PARSING GO...")
    package = parse_go_file(go_path)
    print(f"   ✓ Loaded package: {package.name}")
    print(f"   ✓ Declarations: {len(package.declarations)}")

    # =========================================================================
    # STEP 2: Analyze Package
    # =========================================================================
    print("\n2. ANALYZING PACKAGE...")
    report = analyze_package(package)
    print(f"   ✓ Structs: {report.total_structs} ({report.strict_structs} strict)")
    print(f"   ✓ Fields: {report.total_fields}")
    print(f"   ✓ Undefined references: {report.undefined_references or 'none'}")
    print(f"   ✓ Recursive types: {report.has_cycles}")

    if report.warnings:
        print(f"\n   Warnings ({len(report.warnings)}):")
        for warning in report.warnings:
            print(f"      - {warning}")

    # =========================================================================
    # STEP 3: Generate Declarations
    # =========================================================================
    print("\n3. GENERATING DECLARATIONS...")
    for language, filename in [(Language.FLOW, "models.js"), (Language.TYPESCRIPT, "models.ts")]:
        save_declarations(package, filename, language=language)
        print(f"   ✓ Saved {filename}")

    print("\n4. FLOW OUTPUT:")
    print("-" * 80)
    print(generate_declarations(package, language=Language.FLOW))

    print("=" * 80)
    print("PIPELINE COMPLETE!")
    print("=" * 80)


if __name__ == "__main__":
    main()
