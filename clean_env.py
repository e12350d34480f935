#!/usr/bin/env python3
"""
.env Sanitizer
Strips hidden characters (CR, LF, tabs) and stray whitespace from every value
in a .env file. Secrets are masked in the report.

Usage:
  python clean_env.py                 - Check .env and report dirty values
  python clean_env.py --write         - Rewrite .env with cleaned values
  python clean_env.py path/.env --write
"""
import sys
from pathlib import Path

from transfer_site.config import clean_env_value

SECRET_MARKERS = ("PASSWORD", "SECRET", "KEY", "HASH", "TOKEN")


def mask(name: str, value: str) -> str:
    """Show only the edges of secret values."""
    if not any(marker in name.upper() for marker in SECRET_MARKERS):
        return value
    if len(value) <= 8:
        return "*" * len(value)
    return f"{value[:4]}...{value[-4:]}"


def clean_lines(lines):
    """
    Clean KEY=VALUE lines, keeping comments and blank lines untouched.

    Returns:
        tuple: (cleaned lines, list of (name, old, new) for changed values)
    """
    cleaned = []
    changes = []
    for line in lines:
        stripped = line.rstrip("\n")
        if not stripped.strip() or stripped.lstrip().startswith("#") or "=" not in stripped:
            cleaned.append(stripped.rstrip("\r"))
            continue

        name, raw = stripped.split("=", 1)
        name = name.strip()
        quote = raw.strip()[:1] if raw.strip()[:1] in ("'", '"') else ""
        inner = raw.strip().strip(quote) if quote else raw
        value = clean_env_value(inner)

        rebuilt = f"{name}={quote}{value}{quote}"
        if rebuilt != stripped:
            changes.append((name, raw, value))
        cleaned.append(rebuilt)
    return cleaned, changes


def main():
    """Main function."""
    args = [arg for arg in sys.argv[1:] if arg != "--write"]
    write = "--write" in sys.argv[1:]
    env_path = Path(args[0]) if args else Path(".env")

    print("=" * 60)
    print(".env Sanitizer")
    print("=" * 60)
    print()

    if not env_path.exists():
        print(f"❌ Error: {env_path} not found")
        return

    lines = env_path.read_text(encoding="utf-8").splitlines(keepends=True)
    cleaned, changes = clean_lines(lines)

    if not changes:
        print(f"✅ {env_path}: all values are clean")
        return

    for name, old, new in changes:
        print(f"  {name}: {mask(name, old)!r} -> {mask(name, new)!r}")
    print()

    if write:
        env_path.write_text("\n".join(cleaned) + "\n", encoding="utf-8")
        print(f"✅ Rewrote {env_path} ({len(changes)} value(s) cleaned)")
    else:
        print(f"⚠️  {len(changes)} value(s) need cleaning. Re-run with --write to fix them.")


if __name__ == "__main__":
    main()
