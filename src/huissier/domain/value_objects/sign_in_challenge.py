"""
SignInChallenge value object - Sign-In With Solana (SIWS) input.

Renders the standard SIWS text message and parses it back so the server can
check which nonce and address were bound into the signed bytes.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

MESSAGE_HEADER_SUFFIX = " wants you to sign in with your Solana account:"

# Ordered SIWS fields: (message label, attribute name)
_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("URI", "uri"),
    ("Version", "version"),
    ("Chain ID", "chain_id"),
    ("Nonce", "nonce"),
    ("Issued At", "issued_at"),
    ("Expiration Time", "expiration_time"),
)


def format_timestamp(moment: datetime) -> str:
    """Format datetime as ISO-8601 UTC with millisecond precision."""
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


@dataclass(frozen=True)
class SignInChallenge:
    """
    Structured sign-in challenge for one authentication attempt.

    Ephemeral - never persisted itself; only its nonce is tracked.
    """

    domain: str
    statement: str
    nonce: str
    issued_at: str
    version: str = "1"
    chain_id: str = "mainnet"
    resources: Tuple[str, ...] = field(default_factory=tuple)
    uri: Optional[str] = None
    expiration_time: Optional[str] = None

    def __post_init__(self):
        """Validate challenge fields."""
        if not self.domain:
            raise ValueError("Challenge domain is required")
        if len(self.nonce) < 8 or not self.nonce.isalnum():
            raise ValueError("Challenge nonce must be at least 8 alphanumerics")
        object.__setattr__(self, "resources", tuple(self.resources))

    def to_message(self, address: str) -> str:
        """
        Render SIWS text message for given wallet address.

        Args:
            address: Base58 wallet address that will sign

        Returns:
            Message text exactly as the wallet signs it
        """
        message = f"{self.domain}{MESSAGE_HEADER_SUFFIX}\n{address}"
        if self.statement:
            message += f"\n\n{self.statement}"

        lines = [
            f"{label}: {getattr(self, attr)}"
            for label, attr in _FIELDS
            if getattr(self, attr)
        ]
        if self.resources:
            lines.append("Resources:")
            lines.extend(f"- {resource}" for resource in self.resources)

        if lines:
            message += "\n\n" + "\n".join(lines)
        return message

    def to_dict(self) -> Dict[str, object]:
        """Convert to SIWS input dictionary (camelCase keys)."""
        data: Dict[str, object] = {
            "domain": self.domain,
            "statement": self.statement,
            "version": self.version,
            "nonce": self.nonce,
            "chainId": self.chain_id,
            "issuedAt": self.issued_at,
            "resources": list(self.resources),
        }
        if self.uri:
            data["uri"] = self.uri
        if self.expiration_time:
            data["expirationTime"] = self.expiration_time
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, object]) -> "SignInChallenge":
        """Build challenge from SIWS input dictionary."""
        return cls(
            domain=data["domain"],
            statement=data.get("statement", ""),
            nonce=data["nonce"],
            issued_at=data["issuedAt"],
            version=data.get("version", "1"),
            chain_id=data.get("chainId", "mainnet"),
            resources=tuple(data.get("resources") or ()),
            uri=data.get("uri"),
            expiration_time=data.get("expirationTime"),
        )


@dataclass(frozen=True)
class ParsedSignInMessage:
    """Fields recovered from a signed SIWS text message."""

    domain: str
    address: str
    fields: Dict[str, str]
    resources: List[str]

    @property
    def nonce(self) -> Optional[str]:
        return self.fields.get("Nonce")


def parse_sign_in_message(text: str) -> ParsedSignInMessage:
    """
    Parse SIWS text message.

    Args:
        text: Decoded message text

    Returns:
        ParsedSignInMessage

    Raises:
        ValueError: If text is not a SIWS message
    """
    lines = text.split("\n")
    if len(lines) < 2 or not lines[0].endswith(MESSAGE_HEADER_SUFFIX):
        raise ValueError("Not a Sign-In With Solana message")

    domain = lines[0][: -len(MESSAGE_HEADER_SUFFIX)]
    address = lines[1].strip()
    labels = {label for label, _ in _FIELDS}

    fields: Dict[str, str] = {}
    resources: List[str] = []
    in_resources = False
    for line in lines[2:]:
        if in_resources and line.startswith("- "):
            resources.append(line[2:])
            continue
        in_resources = line == "Resources:"
        label, sep, value = line.partition(": ")
        if sep and label in labels and label not in fields:
            fields[label] = value

    return ParsedSignInMessage(
        domain=domain,
        address=address,
        fields=fields,
        resources=resources,
    )
