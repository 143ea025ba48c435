"""
Allow running the package with: python -m findimagedupes

By default, runs the command-line scanner. Use the 'serve' subcommand for
the web API.

Examples:
    python -m findimagedupes /path/to/photos        # Scan and print matches
    python -m findimagedupes -t 5 dir1 dir2         # Stricter threshold
    python -m findimagedupes serve -p 8080          # Launch web API
    python -m findimagedupes config --init          # Create example config file
"""

import sys


def show_config(init: bool = False) -> int:
    """Print the active configuration, or create an example file."""
    from .user_config import get_user_config

    config = get_user_config()

    if init:
        if config.create_example_config():
            print("Created example configuration file at:")
            print(f"  {config.config_file_path}")
            print("\nEdit this file to customize findimagedupes settings.")
            return 0
        print("Failed to create configuration file.")
        return 1

    print(f"Configuration file: {config.config_file_path}")
    if config.config_file_path.exists():
        print("Status: found")
    else:
        print("Status: not found (using defaults)")
        print("\nRun 'python -m findimagedupes config --init' to create one.")

    print("\nCurrent settings:")
    print(f"  default_threshold: {config.default_threshold}")
    print(f"  default_workers: {config.default_workers}")
    print(f"  default_extensions: {config.default_extensions}")
    print(f"  max_image_pixels: {config.max_image_pixels:,}")
    print(f"  union_find_auto_threshold: {config.union_find_auto_threshold:,}")
    return 0


def main(argv=None):
    argv = list(sys.argv[1:] if argv is None else argv)

    if argv and argv[0] == 'serve':
        from .app import main as serve_main
        serve_main(argv[1:])
        return 0
    elif argv and argv[0] == 'config':
        rest = argv[1:]
        return show_config(init='--init' in rest or '-i' in rest)
    else:
        from .cli import main as cli_main
        return cli_main(argv)


if __name__ == '__main__':
    sys.exit(main())
