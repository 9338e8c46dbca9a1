"""
Patch Overview - status report for patches declared through composer-patches

Reads a Composer project's manifest and lock file and tells, for every patch
declared under extra.patches, whether it is currently:
- Applied to the installed package
- Not applied, but applicable
- Unsure (neither applies nor reverts cleanly)
"""

__version__ = "1.0.0"
__author__ = "Patch Overview Team"
__description__ = "Status report for Composer package patches"
