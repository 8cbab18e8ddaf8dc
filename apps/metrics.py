from flask import Blueprint, Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    PlatformCollector,
    generate_latest,
)
from prometheus_client.core import Counter, GaugeMetricFamily, Histogram
from prometheus_client.multiprocess import MultiProcessCollector
from sqlalchemy import func

from models.cfp import Proposal
from models.event import Event
from models.team import TeamMember

metrics = Blueprint("metric", __name__)

request_duration = Histogram("cfp_request_duration_seconds", "Request duration", ["endpoint", "method"])
request_total = Counter("cfp_request_total", "Total request count", ["endpoint", "method", "http_status"])
invitations_accepted = Counter("cfp_invitations_accepted", "Invitations accepted", ["kind"])


def gauge_groups(gauge, query, *entities):
    counts = query.with_entities(func.count().label("count"), *entities).group_by(*entities).order_by(*entities)
    for count, *key in counts:
        gauge.add_metric([str(k) for k in key], count)


class ExternalMetrics:
    def __init__(self, registry=None):
        if registry is not None:
            registry.register(self)

    def collect(self):
        cfp_proposals = GaugeMetricFamily(
            "cfp_proposals", "Proposals submitted", labels=["event", "deliberation_status"]
        )
        cfp_team_members = GaugeMetricFamily("cfp_team_members", "Team members", labels=["role"])

        gauge_groups(
            cfp_proposals,
            Proposal.query.join(Event, Event.id == Proposal.event_id),
            Event.slug,
            Proposal.deliberation_status,
        )
        gauge_groups(cfp_team_members, TeamMember.query, TeamMember.role)

        return [cfp_proposals, cfp_team_members]


@metrics.route("/metrics")
def collect_metrics():
    registry = CollectorRegistry()
    MultiProcessCollector(registry)
    PlatformCollector(registry)
    ExternalMetrics(registry)

    data = generate_latest(registry)

    return Response(data, mimetype=CONTENT_TYPE_LATEST)
