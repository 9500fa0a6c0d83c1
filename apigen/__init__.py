"""apigen -- Express API project skeleton generator.

Generates a minimal runnable Express server starter (entry point, routing
stub, configuration stub, ``package.json``, optional ``.gitignore`` and
``Dockerfile``) into a target directory.

Usage::

    apigen my-api --git --docker
    python -m apigen my-api
"""

__version__ = "1.0.0"
