'''
**aliascheck.dns**
-------------


The DNS lookup module: walks the delegation chain of a name from the root,
and merges an ANY and an A query into one record set.
See: `aliascheck.dns._core`, `aliascheck.dns._walker` and
`aliascheck.dns._aggregator` for more details.
'''
from aliascheck.dns._aggregator import RecordAggregator, summarize_answer
from aliascheck.dns._core import DNSBackend
from aliascheck.dns._errors import (
    AliascheckError,
    ConfigError,
    DelegationError,
    InvalidHostnameError,
    QueryError,
    VerificationError,
)
from aliascheck.dns._exchange import DNSExchange, QueryExchange
from aliascheck.dns._models import (
    ResolutionResult,
    ResolverConfig,
    append_if_missing,
    to_fqdn,
)
from aliascheck.dns._records import (
    ARecord,
    CNAMERecord,
    DNSRecord,
    NSRecord,
    SOARecord,
)
from aliascheck.dns._roots import ROOT_SERVERS, RootDirectory
from aliascheck.dns._walker import DelegationWalker, suffixes

__all__ = [
    "RecordAggregator",
    "summarize_answer",
    "DNSBackend",
    "AliascheckError",
    "ConfigError",
    "DelegationError",
    "InvalidHostnameError",
    "QueryError",
    "VerificationError",
    "DNSExchange",
    "QueryExchange",
    "ResolutionResult",
    "ResolverConfig",
    "append_if_missing",
    "to_fqdn",
    "ARecord",
    "CNAMERecord",
    "DNSRecord",
    "NSRecord",
    "SOARecord",
    "ROOT_SERVERS",
    "RootDirectory",
    "DelegationWalker",
    "suffixes",
]
