import asyncio
import sys

from aliascheck import dns
from aliascheck.verify import AliasVerifier, VerificationOutcome, VerificationPolicy


def outcome_str(outcome: VerificationOutcome) -> str:
    return f'''
------------------------------
Status: {outcome.status} (code {outcome.code})
Message: {outcome.message}
Resolved: {', '.join(outcome.data) or 'N/A'}
------------------------------
'''


async def main() -> int:
    args = [arg for arg in sys.argv[1:] if not arg.startswith('--')]
    if len(args) < 2:
        hostname1 = input('Enter the hostname to check: ').strip()
        hostname2 = input('Enter the target hostname: ').strip()
    else:
        hostname1, hostname2 = args[0], args[1]

    target_alias = args[2] if len(args) > 2 else None

    try:
        backend = dns.DNSBackend()
    except dns.ConfigError as exc:
        print(f'Cannot read the resolver configuration: {exc}')
        return 1

    verifier = AliasVerifier(
        backend,
        VerificationPolicy(
            enable_chain_detection='--chains' in sys.argv,
        ),
    )
    outcome = await verifier.verify(
        hostname1,
        hostname2,
        target_alias=target_alias,
        nocache='--nocache' in sys.argv,
    )
    if outcome.error is not None:
        print(f'Error resolving {outcome.error.hostname}: {outcome.error.message}')
        return 1

    print(outcome_str(outcome))
    return 0 if outcome.code else 2


if __name__ == '__main__':
    sys.exit(
        asyncio.run(main())
    )
