"""
reg_catalog - A data catalog for regulatory-compliance information.

Loads jurisdictions, regulations, requirements, cloud solutions, compliance
mappings, zone assignments and enforcement assessments from JSON documents,
answers lookups over them, and imports research findings by validating
them and merging them into the existing mappings.
"""

__version__ = "0.1.0"
