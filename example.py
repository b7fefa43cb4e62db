"""Example usage of runtimecompat."""

import json
from runtimecompat import (
    build_table,
    parse_tree,
    percentage,
    resolve_compatibility_date,
    select_monthly_snapshots,
)

# Baseline API surface (as dumped from Node.js)
baseline = parse_tree({
    "buffer": {
        "Buffer": "class",
        "atob": "function",
        "constants": {
            "MAX_LENGTH": "number",
            "MAX_STRING_LENGTH": "number",
        },
    },
    "fs": {
        "readFile": "function",
        "promises": {"readFile": "function"},
    },
})

targets = {
    "bun": parse_tree({
        "buffer": {
            "Buffer": "function",  # function/class are interchangeable
            "atob": "function",
            "constants": {
                "MAX_LENGTH": "number",
                "MAX_STRING_LENGTH": "string",  # mismatch
            },
        },
        "fs": {
            "readFile": "function",
            "promises": {"readFile": "function"},
        },
    }),
    "workerd": parse_tree({
        "buffer": {
            "Buffer": "class",
            "atob": "stub",
            "constants": {"MAX_LENGTH": "missing"},
        },
        # Placeholder module
        "fs": {"default": {"*default*": "object"}},
    }),
}


def main():
    print("=" * 60)
    print("Runtime Support Table")
    print("=" * 60)

    table = build_table(baseline, targets)
    header = ["keyPath", "leafCount", "baseline"] + table.target_names
    print(" | ".join(header))
    for row in table.to_rows():
        print(" | ".join(str(cell) for cell in row))

    print("\nCSV:")
    for row in table.to_csv_rows({"bun": "1.1.20", "workerd": "1.20240701.0"}):
        print(",".join(row))


def example_support_percentage():
    """Single-target support, where placeholder modules count as unsupported."""
    print("\n" + "=" * 60)
    print("Support Percentage")
    print("=" * 60)

    for name, target in targets.items():
        summary = percentage(baseline, target)
        print(f"{name}: {json.dumps(summary.to_dict())}")


def example_snapshots():
    """Monthly snapshots and compatibility dates."""
    print("\n" + "=" * 60)
    print("Monthly Snapshots")
    print("=" * 60)

    versions = ["1.20240105.0", "1.20240119.0", "1.20240208.1", "1.20240301.0", "nightly"]
    accepted = {"2024-01-03", "2024-02-08", "2024-02-27"}

    for snapshot in select_monthly_snapshots(versions):
        compat_date = resolve_compatibility_date(snapshot.version, lambda d: d in accepted)
        print(f"  {snapshot.month}: {snapshot.version} -> compatibility date {compat_date}")


if __name__ == "__main__":
    main()
    example_support_percentage()
    example_snapshots()
