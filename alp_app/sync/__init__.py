"""
Catalog synchronisation module.

Enumerates the course catalog through point reads and presents it as one
complete, id-ordered snapshot.
"""
