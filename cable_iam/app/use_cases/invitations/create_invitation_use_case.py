"""
Create Invitation Use Case

Handles inviting a new person, optionally pre-granting site access.
"""

import logging
from datetime import timedelta
from typing import List, Optional, Sequence

from sqlalchemy.exc import IntegrityError

from cable_iam.app.services.mail_sender import IMailSender
from cable_iam.app.services.membership_policy import SiteAssignment, validate_assignments
from cable_iam.app.services.notification_emails import build_invite_url, invitation_email
from cable_iam.app.services.token_vault import TokenVault
from cable_iam.app.services.unit_of_work import UnitOfWork
from cable_iam.app.use_cases.actor_scope import load_actor_scope
from cable_iam.domain.base import normalize_email, normalize_username, utcnow
from cable_iam.domain.entities import Invitation, InvitationSite, TokenPurpose
from cable_iam.libs.result import Error, Result, Return

from .dtos import CreateInvitationResponse, to_site_infos

logger = logging.getLogger(__name__)

DEFAULT_INVITATION_TTL = timedelta(days=7)

INVITATION_ALREADY_PENDING = Error(
    "INVITATION_ALREADY_PENDING", "Invitation already sent to this email"
)


class CreateInvitationUseCase:
    """
    Use case for creating an invitation.

    Business Rules:
    - Global admins may invite with any (or no) sites
    - Site admins must administer every site in the invitation and name at least one
    - Sites must exist
    - Email must not belong to an existing user
    - Only one pending invitation per email; expired leftovers are purged
    - Site role defaults to SITE_USER
    - Token is returned once and only its digest is stored
    - Invitation email is best-effort and sent after commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        mail_sender: IMailSender,
        base_url: str,
        ttl: timedelta = DEFAULT_INVITATION_TTL,
    ):
        self.uow = uow
        self.mail_sender = mail_sender
        self.base_url = base_url
        self.ttl = ttl

    async def execute(
        self,
        actor_id: int,
        email: str,
        username: str,
        sites: Optional[Sequence[SiteAssignment]] = None,
    ) -> Result[CreateInvitationResponse]:
        """
        Execute create invitation use case.

        Args:
            actor_id: User sending the invitation
            email: Invitee email address
            username: Username the account will be created with
            sites: Sites (and roles) granted on acceptance

        Returns:
            Result with CreateInvitationResponse including the plaintext token, or Error
        """
        assignments: List[SiteAssignment] = list(sites or [])
        email = normalize_email(email)
        username = normalize_username(username)

        if not email or "@" not in email:
            return Return.err(Error("VALIDATION_FAILED", "A valid email is required"))
        if not username:
            return Return.err(Error("VALIDATION_FAILED", "Username is required"))
        validation = validate_assignments(assignments)
        if validation.is_err():
            return Return.err(validation.error)

        async with self.uow:
            loaded = await load_actor_scope(self.uow, actor_id)
            if loaded is None or not loaded[1].is_admin_anywhere:
                return Return.err(
                    Error("UNAUTHORIZED", "Global admin or site admin access required")
                )
            actor, scope = loaded

            site_ids = [a.site_id for a in assignments]
            if not scope.is_global_admin and not site_ids:
                return Return.err(
                    Error("OUT_OF_SCOPE", "Site admins must invite into at least one of their sites")
                )
            if not scope.covers(site_ids):
                return Return.err(
                    Error("OUT_OF_SCOPE", "You can only invite users to sites you administer")
                )

            existing_sites = await self.uow.sites.get_existing_ids(site_ids)
            unknown = [site_id for site_id in site_ids if site_id not in existing_sites]
            if unknown:
                return Return.err(Error("SITE_NOT_FOUND", f"Site not found: {unknown[0]}"))

            if await self.uow.users.get_by_email(email) is not None:
                return Return.err(
                    Error("USER_ALREADY_EXISTS", "User with this email already exists")
                )

            now = utcnow()
            if await self.uow.invitations.get_pending_by_email(email, now) is not None:
                return Return.err(INVITATION_ALREADY_PENDING)

            await self.uow.invitations.delete_dead_by_email(email, now)

            invitation = Invitation(
                email=email,
                username=username,
                invited_by=actor.id,
                sites=[
                    InvitationSite(site_id=a.site_id, site_role=a.site_role, position=index)
                    for index, a in enumerate(assignments)
                ],
            )

            vault = TokenVault(self.uow)
            try:
                token, invitation = await vault.issue(
                    TokenPurpose.invite, invitation, self.ttl, now=now
                )
                await self.uow.commit()
            except IntegrityError:
                # Another request created a pending invitation for this email
                await self.uow.rollback()
                return Return.err(INVITATION_ALREADY_PENDING)

            invite_url = build_invite_url(token, self.base_url)
            response = CreateInvitationResponse(
                id=invitation.id,
                email=invitation.email,
                username=invitation.username,
                token=token,
                invite_url=invite_url,
                expires_at=invitation.expires_at.isoformat(),
                sites=to_site_infos(invitation),
                email_sent=False,
            )

        subject, body = invitation_email(username, actor.username, invite_url, invitation.expires_at)
        sent = await self.mail_sender.send(email, subject, body)
        if sent.is_err():
            response.email_error = sent.error.message
        else:
            response.email_sent = True

        logger.info("User %s invited %s to sites %s", actor_id, email, site_ids)
        return Return.ok(response)
