#!/usr/bin/env python3
"""Helper script to check and create the .env file for service configuration."""

from pathlib import Path
import os

TEMPLATE = """# API Configuration
SLEIGH_API_PREFIX=/api
# SLEIGH_FRONTEND_ALLOWED_ORIGINS - Leave commented to use defaults
# If you need to override, use JSON array format: ["http://localhost:3000","http://127.0.0.1:3000"]
# Or comma-separated: http://localhost:3000,http://127.0.0.1:3000

# Geocoding (any Nominatim-compatible service)
SLEIGH_GEOCODER_BASE_URL=https://nominatim.openstreetmap.org
SLEIGH_GEOCODER_USER_AGENT=sleighroute/0.1 (contact@example.com)
SLEIGH_GEOCODER_MAX_PARALLEL_REQUESTS=1

# Route optimization
SLEIGH_MAX_START_CANDIDATES=10
SLEIGH_TWO_OPT_MAX_ITERATIONS=100
"""


def main():
    project_root = Path(__file__).parent
    env_file = project_root / ".env"

    print("=" * 60)
    print("Sleigh Route Environment Checker")
    print("=" * 60)
    print()

    if env_file.exists():
        print(f"Found .env file at: {env_file}")
        print("-" * 60)
        print(env_file.read_text(encoding="utf-8"))
        print("-" * 60)
        print()
    else:
        print(f".env file NOT found at: {env_file}")
        print("Creating template .env file...")
        env_file.write_text(TEMPLATE, encoding="utf-8")
        print(f"Created .env file at: {env_file}")
        print("Please set SLEIGH_GEOCODER_USER_AGENT to something that identifies your deployment.")
        print()

    print("Environment overrides:")
    overrides = {key: value for key, value in os.environ.items() if key.startswith("SLEIGH_")}
    if not overrides:
        print("   (none)")
    for key, value in sorted(overrides.items()):
        print(f"   {key}={value}")
    print()

    print("Testing config loading...")
    try:
        import sys
        sys.path.insert(0, str(project_root / "src"))
        from sleighroute.config import settings

        print(f"   geocoder_base_url: {settings.geocoder_base_url}")
        print(f"   geocoder_user_agent: {settings.geocoder_user_agent}")
        print(f"   max_start_candidates: {settings.max_start_candidates}")
        print(f"   two_opt_max_iterations: {settings.two_opt_max_iterations}")
        print(f"   frontend_allowed_origins: {', '.join(settings.frontend_allowed_origins)}")
        if settings.geocoder_user_agent == "sleighroute/0.1":
            print()
            print("WARNING: default User-Agent in use; public Nominatim may throttle or block it.")
    except Exception as e:
        print(f"Error loading config: {e}")
        print()
        print("Make sure you're running this from the project root directory")


if __name__ == "__main__":
    main()
