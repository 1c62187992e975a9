"""Data models for the Jagex login pipeline

Dataclasses hold the attempt-scoped state passed between stages. Pydantic
models describe the JSON documents returned by the remote endpoints.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class ProviderMetadata(BaseModel):
    """OpenID Connect discovery document (only the fields we consume)"""
    issuer: Optional[str] = None
    authorization_endpoint: str
    token_endpoint: str
    jwks_uri: Optional[str] = None
    userinfo_endpoint: Optional[str] = None
    scopes_supported: Optional[List[str]] = None
    response_types_supported: Optional[List[str]] = None
    id_token_signing_alg_values_supported: Optional[List[str]] = None


class OAuthToken(BaseModel):
    """Token endpoint response for the authorization code grant"""
    access_token: str = Field(repr=False)
    refresh_token: str = Field(repr=False)
    expires_in: int
    id_token: str = Field(repr=False)
    scope: str
    token_type: str


class OAuthErrorResponse(BaseModel):
    """RFC 6749 error body"""
    error: str
    error_description: Optional[str] = None
    error_uri: Optional[str] = None


class GameSessionResponse(BaseModel):
    """Session-issuance endpoint response"""
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    session_id: str = Field(alias="sessionId")


class CharacterEntry(BaseModel):
    """One entry of the characters endpoint response"""
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    account_id: str = Field(alias="accountId")
    display_name: str = Field(alias="displayName")
    user_hash: str = Field(alias="userHash")


class DisplayNameResponse(BaseModel):
    """Display-name lookup response"""
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    display_name: str = Field(alias="displayName")
    id: str
    user_id: str = Field(alias="userId")


@dataclass(frozen=True)
class PkceCodes:
    """PKCE (Proof Key for Code Exchange) codes for OAuth flow

    Attributes:
        code_verifier: Random string used to generate code_challenge
        code_challenge: SHA256 hash of code_verifier, sent in auth request
    """
    code_verifier: str = field(repr=False)
    code_challenge: str


@dataclass(frozen=True)
class ClientConfig:
    """OAuth client registration bound to discovered provider metadata"""
    client_id: str
    redirect_uri: str
    metadata: ProviderMetadata

    @property
    def authorization_endpoint(self) -> str:
        return self.metadata.authorization_endpoint

    @property
    def token_endpoint(self) -> str:
        return self.metadata.token_endpoint

    @property
    def issuer(self) -> Optional[str]:
        return self.metadata.issuer


@dataclass(frozen=True)
class AuthFlow:
    """State of one login attempt, created by begin_login()

    Attributes:
        client: Client configuration for the launcher login
        authorization_url: URL the auth surface is opened at
        pkce: PKCE verifier/challenge pair
        csrf_token: State value expected back on the redirect
        nonce: Value the id token must carry
    """
    client: ClientConfig
    authorization_url: str
    pkce: PkceCodes
    csrf_token: str = field(repr=False)
    nonce: str = field(repr=False)

    @property
    def verifier(self) -> str:
        return self.pkce.code_verifier

    @property
    def challenge(self) -> str:
        return self.pkce.code_challenge


@dataclass(frozen=True)
class SessionRequest:
    """Hybrid-flow authorization request used to obtain a game session"""
    url: str
    csrf_token: str = field(repr=False)
    nonce: str = field(repr=False)


@dataclass(frozen=True)
class GameSession:
    """Game session derived from the hybrid redirect and the session service"""
    code: str = field(repr=False)
    id_token: str = field(repr=False)
    state: str = field(repr=False)
    session_id: str = field(repr=False)


@dataclass(frozen=True)
class GameCharacter:
    account_id: str
    display_name: str
    user_hash: str
    # The characters endpoint does not report membership yet
    is_members: bool = False


@dataclass(frozen=True)
class AccountInfo:
    """Account metadata resolved from id token claims and the account API

    Attributes:
        subject: ``sub`` claim of the id token
        nickname: ``nickname`` claim of the id token
        display_name: Canonical display name from the account API
        id: Account id reported by the account API
        user_id: External user id reported by the account API
        email: Email address, when known
    """
    subject: str
    nickname: str
    display_name: str
    id: str
    user_id: str
    email: Optional[str] = None


@dataclass(frozen=True)
class Account:
    """Result of a successful login, handed to the UI layer"""
    email: str
    account_name: str
    characters: Tuple[GameCharacter, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["characters"] = [asdict(c) for c in self.characters]
        return data
