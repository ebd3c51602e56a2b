import time

from climate_jobs.models.submission_schema import ProofMedia
from climate_jobs.services.verification import ProofVerifier
from climate_jobs.services.workflow_registry import WorkflowRegistry

from conftest import MODELS, FakeRecognizer


def make_registry(ttl: float = 3600.0) -> WorkflowRegistry:
    return WorkflowRegistry(lambda: ProofVerifier(FakeRecognizer(), MODELS), ttl=ttl)


def test_each_workflow_gets_its_own_token():
    reg = make_registry()
    a, b = reg.create(), reg.create()
    assert a.id != b.id
    assert a.verifier is not b.verifier
    assert reg.get(a.id) is a
    assert len(reg) == 2


def test_attach_media_replaces_previous_upload():
    reg = make_registry()
    wf = reg.create()
    reg.attach_media(wf.id, ProofMedia(data=b"one"))
    reg.attach_media(wf.id, ProofMedia(data=b"two"))
    assert reg.get(wf.id).media.data == b"two"


def test_discard_and_unknown_ids():
    reg = make_registry()
    wf = reg.create()
    reg.discard(wf.id)
    assert reg.get(wf.id) is None
    reg.attach_media("missing", ProofMedia(data=b"x"))
    assert reg.get("missing") is None


def test_idle_workflows_expire():
    reg = make_registry(ttl=-1)
    old = reg.create()
    reg.create()
    assert reg.get(old.id) is None


def test_get_drops_workflow_idle_past_ttl():
    reg = make_registry(ttl=0.01)
    wf = reg.create()
    time.sleep(0.05)
    assert reg.get(wf.id) is None
    assert len(reg) == 0
