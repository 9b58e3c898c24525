import asyncio
import sys

from aliascheck import dns


def result_str(hostname: str, result: dns.ResolutionResult) -> str:
    sep = '-------------------------'
    string = f'\n{sep}\nHostname: {hostname}\n'
    string += f'Nameserver: {result.last_nameserver}\n'
    string += f'CNAME: {result.cname or "N/A"}\n'
    if len(result.cname_chain) > 1:
        string += f'CNAME chain: {" -> ".join(result.cname_chain)}\n'
    for address in result.addresses:
        string += f'- {address}\n'
    string += sep
    return string


async def main() -> int:
    if len(sys.argv) < 2:
        hostname = input('Enter a hostname to look up: ').strip()
    else:
        hostname = sys.argv[1].strip()

    nocache = '--nocache' in sys.argv

    try:
        backend = dns.DNSBackend()
    except dns.ConfigError as exc:
        print(f'Cannot read the resolver configuration: {exc}')
        return 1

    try:
        result = await backend.lookup(hostname, nocache=nocache)
    except dns.AliascheckError as exc:
        print(f'Error looking up {hostname}, check your network connection {exc}')
        return 1

    print(result_str(hostname, result))
    return 0


if __name__ == '__main__':
    sys.exit(
        asyncio.run(main())
    )
