from typing import ClassVar

from flask_login import current_user
from flask_restful import Resource

from apps.common import require_login
from apps.invite import ProposalInvite, TeamInvite

from . import api, domain_errors


class ProposalInvitation(Resource):
    method_decorators: ClassVar = [domain_errors, require_login()]

    def get(self, code):
        return ProposalInvite.with_code(code).resolve()

    def post(self, code):
        """Join the proposal (and its talk) as a co-speaker"""
        return ProposalInvite.with_code(code).attach(current_user.id)


class TeamInvitation(Resource):
    method_decorators: ClassVar = [domain_errors, require_login()]

    def get(self, code):
        return TeamInvite.with_code(code).resolve()

    def post(self, code):
        """Join the team as a reviewer"""
        return TeamInvite.with_code(code).attach(current_user.id)


api.add_resource(ProposalInvitation, "/invite/proposal/<code>")
api.add_resource(TeamInvitation, "/invite/team/<code>")
