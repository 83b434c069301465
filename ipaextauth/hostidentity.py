"""Host, domain, and realm names derived from operator input
"""
import typing

from ipaextauth.errors import ValidationError


def domain_from_host(host: typing.Optional[str]) -> typing.Optional[str]:
    """Domain part of a fully qualified host name

    Returns None for blank or short host names.
    """
    if not host or not host.strip() or "." not in host:
        return None
    return host.split(".", 1)[1]


def fqdn(
    host: typing.Optional[str], domain: typing.Optional[str]
) -> typing.Optional[str]:
    """Append domain to a short host name

    A host name with a dot is already fully qualified and is returned
    unchanged, as is any host name when domain is blank.
    """
    if not host or not host.strip():
        return None
    if "." in host or not domain or not domain.strip():
        return host
    return f"{host}.{domain}"


def realm_from_domain(domain: typing.Optional[str]) -> typing.Optional[str]:
    if not domain or not domain.strip():
        return None
    return domain.upper()


class HostIdentity(typing.NamedTuple):
    host: str
    domain: typing.Optional[str]
    fqdn: str
    realm: typing.Optional[str]

    @classmethod
    def resolve(
        cls,
        host: typing.Optional[str],
        domain: typing.Optional[str] = None,
        realm: typing.Optional[str] = None,
    ) -> "HostIdentity":
        """Compute the identity of a host from partial input

        domain defaults to the domain part of host, realm to the
        upper-cased domain.
        """
        if not domain:
            domain = domain_from_host(host)
        name = fqdn(host, domain)
        if name is None:
            raise ValidationError(
                f"Cannot derive a fully qualified host name from {host!r}."
            )
        if realm:
            realm = realm.upper()
        else:
            realm = realm_from_domain(domain)
        return cls(host=host, domain=domain, fqdn=name, realm=realm)
