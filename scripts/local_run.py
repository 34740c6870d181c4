#!/usr/bin/env python3
"""
Local Run Script

Convenience script for running nodes locally.

Usage:
    python scripts/local_run.py --list
    python scripts/local_run.py --node odoo_rest --param resource=res.partner \\
        --param operation=search --param domain="[('is_company','=',True)]"
    python scripts/local_run.py --node ocilion --param operation=get \\
        --param id="{{ \\$json.customer_id }}" --items items.json --continue-on-fail
"""

import argparse
import json
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv

env_file = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), ".env.local")
if os.path.exists(env_file):
    load_dotenv(env_file)
    print(f"Loaded environment from {env_file}")


def parse_params(pairs: list[str]) -> dict:
    """Parse repeated key=value arguments."""
    params = {}
    for pair in pairs:
        if "=" not in pair:
            raise ValueError(f"Parameter must be key=value, got {pair!r}")
        key, value = pair.split("=", 1)
        params[key.strip()] = value
    return params


def load_items(source: str) -> list:
    """Load input items from a JSON file ("-" for stdin)."""
    if source == "-":
        data = json.load(sys.stdin)
    else:
        with open(source) as f:
            data = json.load(f)
    if isinstance(data, dict):
        return [data]
    return data


def main():
    parser = argparse.ArgumentParser(
        description="Run REST nodes locally",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--node",
        help="Node name to run",
    )
    parser.add_argument(
        "--param",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Node parameter (repeatable)",
    )
    parser.add_argument(
        "--items",
        help="JSON file with input items ('-' for stdin, default: one empty item)",
    )
    parser.add_argument(
        "--continue-on-fail",
        action="store_true",
        help="Turn per-item errors into error items instead of aborting",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List available nodes",
    )

    args = parser.parse_args()

    # Import after path setup
    from restnodes.context import ExecutionContext
    from restnodes.config import get_settings
    from restnodes.nodes import get_node, list_nodes

    if args.list:
        print("\nAvailable Nodes:")
        print("-" * 60)
        for node in list_nodes(include_schema=True):
            print(f"  {node['name']}")
            print(f"    {node.get('description', 'No description')}")
            print(f"    Operations: {', '.join(node['operations'])}")
            print(f"    Parameters: {', '.join(p['name'] for p in node['properties'])}")
            print()
        return

    if not args.node:
        parser.print_help()
        return

    node_class = get_node(args.node)
    if not node_class:
        print(f"Error: Unknown node '{args.node}'")
        print(f"Available: {[n['name'] for n in list_nodes()]}")
        sys.exit(1)

    try:
        get_settings().validate_for_node(args.node)
        params = parse_params(args.param)
        items = load_items(args.items) if args.items else [{}]
    except (ValueError, OSError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    ctx = ExecutionContext.for_cli(
        node_name=args.node,
        continue_on_fail=args.continue_on_fail,
    )

    print(f"\nRunning: {args.node}")
    print(f"  Parameters: {params}")
    print(f"  Items: {len(items)}")
    print("-" * 60)

    try:
        node = node_class(ctx)
        result = node.execute(items, params)

        print("\nResult:")
        print("-" * 60)
        print(f"  Status: {result.status.value}")
        print(f"  Items in: {result.items_in}")
        print(f"  Items out: {result.items_out}")
        print(f"  Errors: {len(result.errors)}")

        if result.duration_seconds:
            print(f"  Duration: {result.duration_seconds:.2f}s")

        print("\nOutput:")
        print(json.dumps([item.json for item in result.items], indent=2, default=str))

        if result.errors:
            print("\nErrors (first 5):")
            for error in result.errors[:5]:
                print(f"  - {error}")

    except Exception as e:
        print(f"\nNode failed: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
