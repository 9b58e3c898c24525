'''
**aliascheck**

Resolves hostnames by walking their delegation chain from the root and
verifies that a hostname points at a target service, either through a
CNAME or by sharing its addresses.
'''
__version__ = '0.1.0'
