"""Tests for merge action resolution."""

import pytest

from prefab_merge_tool.core.merge_actions import (
    ChangePropertyAction,
    DeleteComponentAction,
    DeleteGameObjectAction,
    MergeActionKind,
    NewComponentAction,
    NewGameObjectAction,
)
from prefab_merge_tool.core.property_cursor import MISSING, PropertySnapshot
from prefab_merge_tool.core.unity_model import (
    ConflictResolution,
    UnityComponent,
    UnityDocument,
    UnityGameObject,
    UnityProperty,
)


def make_component(file_id: str, type_name: str = "Rigidbody", mass: float = 1.0) -> UnityComponent:
    return UnityComponent(
        file_id=file_id,
        type_name=type_name,
        properties=[UnityProperty("m_Mass", mass, "m_Mass")],
    )


@pytest.fixture
def ours_doc() -> UnityDocument:
    doc = UnityDocument(file_path="ours.prefab")
    root = UnityGameObject(file_id="100", name="Root", components=[make_component("101", "Transform")])
    doc.attach_object(root)
    doc.attach_object(
        UnityGameObject(file_id="200", name="Body", components=[make_component("201")]),
        root,
    )
    return doc


@pytest.fixture
def theirs_root() -> UnityGameObject:
    root = UnityGameObject(file_id="100", name="Root")
    for file_id, name in (("200", "Body"), ("300", "Head")):
        child = UnityGameObject(
            file_id=file_id,
            name=name,
            components=[make_component(str(int(file_id) + 1))],
            parent=root,
        )
        root.children.append(child)
    return root


class TestStateMachine:
    def test_initial_state(self, ours_doc):
        action = DeleteGameObjectAction(ours_doc.get_object("200"), ours_doc)
        assert action.kind == MergeActionKind.DELETE_GAME_OBJECT
        assert action.resolution == ConflictResolution.UNRESOLVED
        assert action.merged is False

    def test_resolve_is_idempotent(self, ours_doc):
        action = DeleteGameObjectAction(ours_doc.get_object("200"), ours_doc)
        assert action.use_theirs() is True
        assert action.use_theirs() is False
        assert action.merged is True

    def test_switching_sides_requires_reset(self, ours_doc):
        action = DeleteGameObjectAction(ours_doc.get_object("200"), ours_doc)
        action.resolve(ConflictResolution.USE_OURS)

        with pytest.raises(RuntimeError):
            action.use_theirs()

        assert action.reset() is True
        assert action.merged is False
        assert action.use_theirs() is True

    def test_resolve_unresolved_resets(self, ours_doc):
        action = DeleteGameObjectAction(ours_doc.get_object("200"), ours_doc)
        action.use_theirs()
        assert action.resolve(ConflictResolution.UNRESOLVED) is True
        assert action.resolution == ConflictResolution.UNRESOLVED
        assert action.reset() is False

    def test_use_ours_forces_from_theirs(self, ours_doc):
        action = DeleteGameObjectAction(ours_doc.get_object("200"), ours_doc)
        action.use_theirs()
        assert action.use_ours() is True
        assert action.resolution == ConflictResolution.USE_OURS
        assert action.use_ours() is False


class TestNewGameObjectAction:
    def test_use_theirs_creates_object_under_parent(self, ours_doc, theirs_root):
        head = theirs_root.children[1]
        action = NewGameObjectAction(head, ours_doc)
        assert action.ours is None

        action.use_theirs()

        created = ours_doc.get_object("300")
        assert action.ours is created
        assert created is not head
        assert created.get_path() == "Root/Head"
        assert ours_doc.get_component("301") is created.components[0]

    def test_use_ours_keeps_document(self, ours_doc, theirs_root):
        action = NewGameObjectAction(theirs_root.children[1], ours_doc)
        action.use_ours()

        assert action.merged
        assert action.ours is None
        assert ours_doc.get_object("300") is None

    def test_reset_removes_created_object(self, ours_doc, theirs_root):
        action = NewGameObjectAction(theirs_root.children[1], ours_doc)
        action.use_theirs()
        action.reset()

        assert action.ours is None
        assert ours_doc.get_object("300") is None
        assert [c.name for c in ours_doc.get_object("100").children] == ["Body"]

    def test_adopts_children_created_first(self, theirs_root):
        doc = UnityDocument(file_path="ours.prefab")
        grandchild = UnityGameObject(file_id="400", name="Eye", parent=theirs_root.children[1])
        theirs_root.children[1].children.append(grandchild)

        NewGameObjectAction(grandchild, doc).use_theirs()
        assert doc.get_object("400").parent is None

        NewGameObjectAction(theirs_root.children[1], doc).use_theirs()

        assert doc.get_object("400").get_path() == "Head/Eye"
        assert [go.name for go in doc.root_objects] == ["Head"]

    def test_reverting_parent_keeps_resolved_children(self, ours_doc, theirs_root):
        head = theirs_root.children[1]
        eye = UnityGameObject(
            file_id="400", name="Eye", components=[make_component("401")], parent=head
        )
        head.children.append(eye)
        parent_action = NewGameObjectAction(head, ours_doc)
        child_action = NewGameObjectAction(eye, ours_doc)
        parent_action.use_theirs()
        child_action.use_theirs()
        assert child_action.ours.get_path() == "Root/Head/Eye"

        parent_action.use_ours()

        assert ours_doc.get_object("300") is None
        assert ours_doc.get_object("400") is child_action.ours
        assert child_action.ours.parent is None
        assert child_action.ours in ours_doc.root_objects
        assert ours_doc.get_component("401") is child_action.ours.components[0]

    def test_reverting_parent_keeps_adopted_children(self, theirs_root):
        doc = UnityDocument(file_path="ours.prefab")
        head = theirs_root.children[1]
        eye = UnityGameObject(file_id="400", name="Eye", parent=head)
        head.children.append(eye)
        child_action = NewGameObjectAction(eye, doc)
        parent_action = NewGameObjectAction(head, doc)
        child_action.use_theirs()
        parent_action.use_theirs()

        parent_action.reset()
        assert [go.name for go in doc.root_objects] == ["Eye"]
        assert doc.get_object("400") is child_action.ours

        parent_action.use_theirs()
        assert doc.get_object("400").get_path() == "Head/Eye"

    def test_without_document(self, theirs_root):
        action = NewGameObjectAction(theirs_root.children[1])
        action.use_theirs()
        assert action.ours.name == "Head"
        assert action.ours.parent is None


class TestDeleteGameObjectAction:
    def test_use_theirs_detaches(self, ours_doc):
        body = ours_doc.get_object("200")
        action = DeleteGameObjectAction(body, ours_doc)

        action.use_theirs()

        assert ours_doc.get_object("200") is None
        assert ours_doc.get_component("201") is None
        assert action.ours is body

    def test_use_ours_after_theirs_restores(self, ours_doc):
        body = ours_doc.get_object("200")
        action = DeleteGameObjectAction(body, ours_doc)
        action.use_theirs()
        action.use_ours()

        assert ours_doc.get_object("200") is body
        assert body.get_path() == "Root/Body"

    def test_without_document_unlinks_from_parent(self):
        root = UnityGameObject(file_id="1", name="Root")
        child = UnityGameObject(file_id="2", name="Child")
        other = UnityGameObject(file_id="3", name="Other")
        root.add_child(child)
        root.add_child(other)
        action = DeleteGameObjectAction(child)

        action.use_theirs()
        assert root.children == [other]
        assert child.parent is None

        action.use_ours()
        assert root.children == [child, other]
        assert child.parent is root


class TestComponentActions:
    def test_new_component(self, ours_doc):
        body = ours_doc.get_object("200")
        collider = make_component("202", "BoxCollider")
        action = NewComponentAction(body, collider, ours_doc)
        assert action.description == "Add component Box Collider"

        action.use_theirs()
        added = body.components[-1]
        assert added is not collider
        assert added.file_id == "202"
        assert ours_doc.get_component("202") is added

        action.use_ours()
        assert [c.file_id for c in body.components] == ["201"]
        assert ours_doc.get_component("202") is None

    def test_delete_component_restores_position(self, ours_doc):
        body = ours_doc.get_object("200")
        extra = make_component("202", "BoxCollider")
        body.add_component(extra)
        ours_doc.register_component(extra)
        action = DeleteComponentAction(body, body.components[0], ours_doc)

        action.use_theirs()
        assert [c.file_id for c in body.components] == ["202"]
        assert ours_doc.get_component("201") is None

        action.reset()
        assert [c.file_id for c in body.components] == ["201", "202"]
        assert ours_doc.get_component("201") is not None


class TestChangePropertyAction:
    def make_action(self, ours_doc):
        body = ours_doc.get_object("200")
        comp = body.components[0]
        action = ChangePropertyAction(
            body,
            comp,
            PropertySnapshot("m_Mass", "m_Mass", 1.0),
            PropertySnapshot("m_Mass", "m_Mass", 5.0),
        )
        return action, comp

    def test_use_theirs_writes_value(self, ours_doc):
        action, comp = self.make_action(ours_doc)
        action.use_theirs()
        assert comp.get_property("m_Mass").value == 5.0

    def test_use_ours_writes_back(self, ours_doc):
        action, comp = self.make_action(ours_doc)
        action.use_theirs()
        action.use_ours()
        assert comp.get_property("m_Mass").value == 1.0
        assert action.their_property.value == 5.0

    def test_description(self, ours_doc):
        action, _ = self.make_action(ours_doc)
        assert action.kind == MergeActionKind.CHANGE_PROPERTY
        assert action.description == "Rigidbody.Mass: 1.0 -> 5.0"

    def test_field_only_in_theirs_is_added(self):
        comp = UnityComponent("1", "MonoBehaviour", [UnityProperty("a", 1, "a"), UnityProperty("c", 3, "c")])
        body = UnityGameObject(file_id="200", name="Body", components=[comp])
        action = ChangePropertyAction(
            body, comp, PropertySnapshot("b", "b", MISSING), PropertySnapshot("b", "b", 2)
        )
        assert action.description == "Script.B: (missing) -> 2"

        action.use_theirs()
        assert {p.path: p.value for p in comp.properties} == {"a": 1, "b": 2, "c": 3}

        action.use_ours()
        assert [(p.path, p.value) for p in comp.properties] == [("a", 1), ("c", 3)]

    def test_field_only_in_ours_is_removed(self):
        comp = UnityComponent("1", "MonoBehaviour", [UnityProperty("a", 1, "a"), UnityProperty("b", 2, "b")])
        body = UnityGameObject(file_id="200", name="Body", components=[comp])
        action = ChangePropertyAction(
            body, comp, PropertySnapshot("a", "a", 1), PropertySnapshot("a", "a", MISSING)
        )

        action.use_theirs()
        assert [p.path for p in comp.properties] == ["b"]

        action.reset()
        assert [(p.path, p.value) for p in comp.properties] == [("a", 1), ("b", 2)]
