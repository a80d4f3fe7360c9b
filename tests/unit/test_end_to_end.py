"""
End-to-end flow: build a tree, publish its root, prove and verify
membership against the registered root, then retire it.
"""
import pytest

from core.merkle import build_tree, export_proof, prove_membership, verify, verify_proof_document
from core.schemas.errors import UnauthorizedException
from fixtures import HARDHAT_ACCOUNTS, make_address, make_registry


@pytest.mark.integration
class TestAllowlistLifecycle:

    def test_publish_prove_retire(self):
        a1, a2, a3, a4 = HARDHAT_ACCOUNTS
        creator = make_address("list-operator")
        stranger = make_address("stranger")
        registry, sink, _ = make_registry()

        tree = build_tree([a1, a2, a3])
        root = tree.root_hex

        assert registry.is_newcomer(creator)
        registry.register(root, "phase 1", 3, caller=creator, fee_paid=0)
        assert registry.is_registered(root)
        assert sink.transfers == []

        proof = prove_membership(tree, a2)
        assert verify(root, proof, a2)
        assert not verify(root, proof, a4)

        with pytest.raises(UnauthorizedException):
            registry.update_description(root, "phase 1 final", caller=stranger)

        registry.remove(root, caller=creator)
        assert not registry.is_registered(root)
        assert registry.get_entry(root).description == "phase 1"

    def test_member_checks_document_against_registry(self):
        """A member holding only a proof document checks it against the published root."""
        members = HARDHAT_ACCOUNTS[:3]
        creator = make_address("list-operator")
        registry, _, _ = make_registry()

        tree = build_tree(members)
        registry.register(tree.root, "airdrop", len(members), caller=creator)

        document = export_proof(tree, members[0])
        published = registry.get_entry(document.merkle_root)

        assert published.is_active
        assert verify_proof_document(document, root=published.root)
