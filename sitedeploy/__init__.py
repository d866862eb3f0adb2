"""Sitedeploy: deployment pipeline for a statically built website.

This package builds the site with its npm toolchain and ships the build output
to a remote web-root over ssh and rsync.

The pipeline runs four stages in order and stops at the first failure:
- Build: compile the site into the local output directory.
- Purge: delete the previous deployment from the remote web-root.
- Sync: copy the new build output to the remote web-root.
- Permissions: hand ownership of the web-root back to the web server.

The main entry point is the CLI module.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
