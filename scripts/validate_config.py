#!/usr/bin/env python3
"""Configuration validation script."""

import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

# Add the project root to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from ath_app.config.loader import ConfigLoader
from ath_app.config.validation import ConfigValidator, ValidationError


def validate_settings(config_dir: Optional[Path] = None,
                      overrides: Optional[Dict[str, Any]] = None) -> List[ValidationError]:
    """Validate the merged configuration for a config directory."""
    loader = ConfigLoader.create(config_dir)
    config = loader.merge_config(overrides)
    return ConfigValidator.validate_config(config)


def main():
    """Main validation function."""
    config_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else None
    loader = ConfigLoader.create(config_dir)

    print(f"🔍 Validating ATH App configuration in {loader.config_dir}...")

    all_valid = True

    try:
        errors = validate_settings(config_dir)

        if errors:
            print(f"❌ Found {len(errors)} validation errors:")
            for error in errors:
                print(f"  • {error.field}: {error.message} (value: {error.value})")
            all_valid = False
        else:
            config = loader.load()
            print("✅ settings.yaml is valid")
            print(f"  • pacing: {config.batch.pause_ms}ms, concurrency {config.batch.concurrency}")
            print(f"  • retries: {config.batch.max_attempts} attempts, "
                  f"{config.batch.backoff_ms}ms backoff")
            print(f"  • peak cache TTL: {config.cache.ttl_days} days")

    except Exception as e:
        print(f"❌ Error loading settings: {e}")
        all_valid = False

    # Request-level overrides
    print("\n📋 Testing request-level overrides...")
    test_overrides = {
        "batch": {"pause_ms": 100, "max_attempts": 3},
        "threshold": {"default": 2.0},
    }

    try:
        errors = validate_settings(config_dir, test_overrides)

        if errors:
            print("❌ Override validation failed:")
            for error in errors:
                print(f"  • {error.field}: {error.message}")
            all_valid = False
        else:
            print("✅ Override validation passed")

    except Exception as e:
        print(f"❌ Error testing overrides: {e}")
        all_valid = False

    if all_valid:
        print("\n🎉 All configuration validation passed!")
        sys.exit(0)
    else:
        print("\n❌ Configuration validation failed!")
        sys.exit(1)


if __name__ == "__main__":
    main()
