#!/usr/bin/env python
"""
Command-line entry point for the Dayspring backend.  It sets the default
settings module to ``dayspring.settings`` and delegates to Django's
management utility, which also exposes the ``run_export`` and
``seed_clinic`` commands.
"""
import os
import sys


def main() -> None:
    """Run administrative tasks for the Dayspring backend."""
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'dayspring.settings')
    try:
        from django.core.management import execute_from_command_line  # type: ignore
    except ImportError as exc:
        raise ImportError(
            "Couldn't import Django. Are you sure it's installed and "
            "available on your PYTHONPATH environment variable? Did you "
            "forget to activate a virtual environment?"
        ) from exc
    execute_from_command_line(sys.argv)


if __name__ == '__main__':
    main()
