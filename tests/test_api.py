import pytest

from models.cfp import Review
from tests._utils import (
    create_category,
    create_event,
    create_proposal,
    create_review,
    create_talk,
    create_team,
    create_user,
)


@pytest.fixture(scope="module")
def owner(db):
    return create_user(name="Selina Kyle")


@pytest.fixture(scope="module")
def speaker(db):
    return create_user(name="Harvey Dent")


@pytest.fixture
def event(db, owner):
    return create_event(create_team(owners=[owner]))


@pytest.fixture
def proposal(event, speaker):
    return create_proposal(event, create_talk([speaker], title="Two sides of a coin"))


def reviews_url(event, suffix=""):
    return f"/api/team/{event.team.slug}/{event.slug}/reviews{suffix}"


def test_requires_login(client, event, proposal):
    assert client.get(reviews_url(event)).status_code == 401
    assert client.get(reviews_url(event, "/export/json")).status_code == 401
    assert client.put(reviews_url(event, f"/{proposal.id}"), json={"feeling": "POSITIVE"}).status_code == 401
    assert client.get(f"/api/invite/team/{event.team.invitation_code}").status_code == 401


def test_search(login, owner, event, proposal):
    rv = login(owner).get(reviews_url(event), query_string={"query": "coin", "status": "pending"})

    assert rv.status_code == 200
    assert rv.json["results"][0]["id"] == proposal.id
    assert rv.json["results"][0]["speakers"] == [{"name": "Harvey Dent", "picture": proposal.speakers[0].picture}]
    assert rv.json["filters"] == {"query": "coin", "status": "pending"}
    assert rv.json["statistics"] == {"reviewed": 0, "total": 1}
    assert rv.json["pagination"] == {"current": 1, "total": 1}


def test_search_forbidden(login, event):
    rv = login(create_user()).get(reviews_url(event))
    assert rv.status_code == 403


def test_search_bad_filter(login, owner, event):
    rv = login(owner).get(reviews_url(event), query_string={"sort": "alphabetical"})
    assert rv.status_code == 400


def test_json_export(login, owner, speaker, event, proposal):
    category = create_category(event, "Security")
    proposal.categories.append(category)
    create_review(proposal, owner, "POSITIVE")

    rv = login(owner).get(reviews_url(event, "/export/json"))

    assert rv.status_code == 200
    [row] = rv.json
    assert row["title"] == "Two sides of a coin"
    assert row["comments"] == "Thanks!"
    assert row["categories"] == ["Security"]
    assert row["reviews"] == {"positives": 1, "negatives": 0, "average": 5}
    assert row["speakers"][0]["email"] == speaker.email
    assert row["speakers"][0]["socials"] == speaker.socials


def test_cards_export(db, login, owner, event, proposal):
    event.display_proposals_reviews = False
    db.session.commit()

    rv = login(owner).get(reviews_url(event, "/export/cards"))

    assert rv.status_code == 200
    assert rv.json == [
        {
            "id": proposal.id,
            "title": "Two sides of a coin",
            "languages": ["en"],
            "level": "BEGINNER",
            "categories": [],
            "formats": [],
            "speakers": ["Harvey Dent"],
        }
    ]


def test_put_review(login, owner, event, proposal):
    rv = login(owner).put(reviews_url(event, f"/{proposal.id}"), json={"feeling": "NEUTRAL", "note": 3})

    assert rv.status_code == 200
    assert rv.json == {"note": 3, "feeling": "NEUTRAL", "comment": None}
    assert Review.query.filter_by(proposal_id=proposal.id, user_id=owner.id).one().note == 3

    rv = login(owner).get(reviews_url(event, f"/{proposal.id}"))
    assert rv.status_code == 200
    assert rv.json["you"] == {"note": 3, "feeling": "NEUTRAL", "comment": None}
    assert rv.json["summary"]["average"] == 3


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"note": 3},
        {"feeling": "POSITIVE", "note": "five"},
        {"feeling": "POSITIVE", "note": True},
        {"feeling": "POSITIVE", "note": 9},
        {"feeling": "THRILLED"},
        {"feeling": "POSITIVE", "score": 3},
    ],
)
def test_put_invalid_review(login, owner, event, proposal, payload):
    rv = login(owner).put(reviews_url(event, f"/{proposal.id}"), json=payload)
    assert rv.status_code == 400


def test_put_review_on_unknown_proposal(login, owner, event):
    rv = login(owner).put(reviews_url(event, "/999999"), json={"feeling": "POSITIVE"})
    assert rv.status_code == 404


def test_team_invitation(login, event):
    user = create_user()
    url = f"/api/invite/team/{event.team.invitation_code}"

    rv = login(user).get(url)
    assert rv.status_code == 200
    assert rv.json == {"id": event.team.id, "slug": event.team.slug, "name": event.team.name}

    rv = login(user).post(url)
    assert rv.status_code == 200
    assert event.team.get_member_role(user.id) == "REVIEWER"

    # Now a reviewer, they can search the event's proposals
    assert login(user).get(reviews_url(event)).status_code == 200


def test_proposal_invitation(login, speaker, proposal):
    cospeaker = create_user()
    url = f"/api/invite/proposal/{proposal.invitation_code}"

    rv = login(cospeaker).post(url)

    assert rv.status_code == 200
    assert rv.json["id"] == proposal.id
    assert rv.json["event"] == {"slug": proposal.event.slug, "name": proposal.event.name}
    assert {s.id for s in proposal.speakers} == {speaker.id, cospeaker.id}


def test_unknown_invitation(login, owner):
    assert login(owner).get("/api/invite/proposal/unknown").status_code == 404
    assert login(owner).post("/api/invite/team/unknown").status_code == 404


def test_metrics(client):
    rv = client.get("/metrics")
    assert rv.status_code == 200
    assert b"cfp_proposals" in rv.data


def test_each_request_loads_its_own_user(client, login, owner, event):
    assert client.get(reviews_url(event)).status_code == 401
    assert login(owner).get(reviews_url(event)).status_code == 200
    assert login(create_user()).get(reviews_url(event)).status_code == 403
    assert client.get(reviews_url(event)).status_code == 401
