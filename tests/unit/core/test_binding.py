"""Tests for the workflow applicability binding."""

import pytest

from workflow_overlay.common.config import LabelConfig, OverlayConfig
from workflow_overlay.core.binding import ApplicabilityBinding
from workflow_overlay.db.models import WorkflowInstanceRecord
from workflow_overlay.db.repository import WorkflowInstanceRepository
from workflow_overlay.schemas.fields import (
    DropdownField,
    FieldList,
    FormAction,
    ListboxField,
    ReadonlyField,
    Tab,
    TabSet,
    WorkflowLogField,
)

from tests.factories import (
    FakePage,
    LinkableRecord,
    PageWithSettings,
    PreviewablePage,
    create_action_instance,
    create_definition,
    create_instance,
    create_transition,
)


@pytest.fixture
def make_binding(workflow_service, job_guard, settings, overlay_config):
    def _make(content, actor=None, **kwargs):
        kwargs.setdefault("settings", settings)
        kwargs.setdefault("config", overlay_config)
        return ApplicabilityBinding(
            content,
            workflow_service,
            job_guard=job_guard,
            current_user=lambda: actor,
            **kwargs,
        )
    return _make


class TestAuthorization:
    """Test the host-facing authorization overrides."""

    def test_no_opinion_without_workflow(self, make_binding, page, editor):
        binding = make_binding(page, editor)
        assert binding.can_edit(editor) is None
        assert binding.can_publish() is None
        assert binding.can_edit_workflow() is False

    def test_publish_uses_ambient_actor(self, make_binding, workflow_service, page, editor):
        """Test can_publish asks the definition with the current user."""
        definition = create_definition(publish_allowed=True)
        workflow_service.definition = definition

        assert make_binding(page, editor).can_publish() is True
        assert definition.publish_calls == [(editor, page)]

    def test_publish_denied_without_ambient_actor(self, make_binding, workflow_service, page):
        workflow_service.definition = create_definition(publish_allowed=True)
        assert make_binding(page, None).can_publish() is False

    def test_instance_without_publish_opinion(self, make_binding, workflow_service, page, editor):
        """Test the definition allows publishing when the instance has no opinion."""
        workflow_service.instance = create_instance(publish_target=None)
        workflow_service.definition = create_definition(publish_allowed=True)
        assert make_binding(page, editor).can_publish() is True

    def test_background_job(self, make_binding, workflow_service, processing_state, editor):
        workflow_service.instance = create_instance(edit_target=False, publish_target=False)
        binding = make_binding(FakePage(scheduled=True), editor)

        with processing_state.processing():
            assert binding.can_edit(editor) is True
            assert binding.can_publish() is True


class TestWorkflowInstance:

    def test_lookup_once(self, make_binding, workflow_service, page):
        """Test the instance is resolved once per binding."""
        workflow_service.instance = create_instance()
        binding = make_binding(page)

        assert binding.workflow_instance() is binding.workflow_instance()
        binding.can_edit()
        binding.prevent_scheduled_publish_jobs()
        assert workflow_service.workflow_lookups == 1


class TestPreventScheduledPublishJobs:

    def test_running_instance(self, make_binding, workflow_service, page):
        workflow_service.instance = create_instance()
        assert make_binding(page).prevent_scheduled_publish_jobs() is True

    def test_applicable_definition(self, make_binding, workflow_service, page):
        workflow_service.definition = create_definition()
        assert make_binding(page).prevent_scheduled_publish_jobs() is True

    def test_no_workflow(self, make_binding, page):
        assert make_binding(page).prevent_scheduled_publish_jobs() is False


class TestOnAfterWrite:
    """Test the after-write notification."""

    def test_notifies_current_action(self, make_binding, workflow_service, page):
        action = create_action_instance()
        instance = create_instance(action=action)
        workflow_service.instance = instance

        make_binding(page).on_after_write()

        assert action.behaviour.updated == [instance]

    def test_no_instance(self, make_binding, page):
        """Test nothing happens without a workflow."""
        make_binding(page).on_after_write()

    def test_no_current_action(self, make_binding, workflow_service, page):
        """Test instances without a current action aren't notified."""
        workflow_service.instance = create_instance(action=None)
        make_binding(page).on_after_write()

    def test_engine_errors_propagate(self, make_binding, workflow_service, page):
        """Test failures in the behaviour reach the caller."""
        action = create_action_instance()

        def fail(instance):
            raise RuntimeError("engine failure")

        action.behaviour.target_updated = fail
        workflow_service.instance = create_instance(action=action)

        with pytest.raises(RuntimeError, match="engine failure"):
            make_binding(page).on_after_write()


class TestRecentWorkflowComment:

    def test_first_commented_action(self, make_binding, workflow_service, page):
        """Test the most recent action with a comment is returned."""
        commented = create_action_instance(comment="Looks good")
        workflow_service.history = [
            create_action_instance(comment=""),
            create_action_instance(comment=None),
            commented,
            create_action_instance(comment="Older"),
        ]

        assert make_binding(page).recent_workflow_comment() is commented

    def test_default_limit_from_config(self, make_binding, workflow_service, page):
        make_binding(page).recent_workflow_comment()
        assert workflow_service.history_limits == [10]

    def test_explicit_limit(self, make_binding, workflow_service, page):
        """Test comments beyond the limit aren't found."""
        workflow_service.history = [
            create_action_instance(),
            create_action_instance(),
            create_action_instance(comment="Too old"),
        ]

        assert make_binding(page).recent_workflow_comment(2) is None
        assert workflow_service.history_limits == [2]

    def test_no_history(self, make_binding, page):
        assert make_binding(page).recent_workflow_comment() is None


class TestLinks:

    def test_previewable_edit_link(self, make_binding):
        binding = make_binding(PreviewablePage(link="/admin/pages/edit/show/7"))
        assert binding.absolute_edit_link() == "https://cms.example.com/admin/pages/edit/show/7"

    def test_previewable_without_link(self, make_binding):
        assert make_binding(PreviewablePage(link=None)).absolute_edit_link() is None

    def test_workflow_link_fallback(self, make_binding):
        record = LinkableRecord(9)
        assert make_binding(record).absolute_edit_link() == "https://cms.example.com/admin/records/9/edit"

    def test_no_link_capability(self, make_binding, page):
        assert make_binding(page).absolute_edit_link() is None

    def test_pending_items_link(self, make_binding, workflow_service, page):
        instance = create_instance()
        workflow_service.instance = instance

        link = make_binding(page).link_to_pending_items()

        assert link.startswith("https://cms.example.com/admin/workflows/")
        assert link.endswith(f"/PendingObjects/item/{instance.id}/edit")

    def test_pending_items_link_without_instance(self, make_binding, page):
        assert make_binding(page).link_to_pending_items() is None


class TestWorkflowInstances:

    def test_identity_query(self, make_binding, db_session):
        """Test only instances targeting this object's class and id are listed."""
        page = FakePage(5)
        db_session.add_all([
            WorkflowInstanceRecord(title="mine", target_class="FakePage", target_id=5),
            WorkflowInstanceRecord(title="other id", target_class="FakePage", target_id=6),
            WorkflowInstanceRecord(title="other class", target_class="File", target_id=5),
        ])
        db_session.flush()

        binding = make_binding(page, instance_repository=WorkflowInstanceRepository(db_session))

        assert [record.title for record in binding.workflow_instances()] == ["mine"]

    def test_without_repository(self, make_binding, page):
        with pytest.raises(RuntimeError):
            make_binding(page).workflow_instances()


class TestUpdateCmsActions:
    """Test rendering workflow actions into the host form."""

    def test_nothing_to_add(self, make_binding, page, editor):
        actions = FieldList()
        make_binding(page, editor).update_cms_actions(actions)
        assert actions.children == []

    def test_major_and_additional(self, make_binding, workflow_service, editor):
        """Test the first start button is major and the rest go in the menu."""
        review = create_definition(initial_action_title="Submit")
        express = create_definition(initial_action_title="Fast-track")
        page = FakePage(definition=review, additional=[express])
        workflow_service.definitions_for = [review, express]

        actions = FieldList(children=[
            TabSet(name="MajorActions"),
            TabSet(name="ActionMenus", children=[Tab(name="MoreOptions")]),
        ])
        make_binding(page, editor).update_cms_actions(actions)

        major = actions.field_by_name("MajorActions")
        assert [button.title for button in major.children] == ["Submit"]
        menu = actions.field_by_name("ActionMenus")
        assert menu.names() == ["AdditionalWorkflows", "MoreOptions"]
        additional = actions.field_by_name("ActionMenus.AdditionalWorkflows")
        assert [button.title for button in additional.children] == ["Fast-track"]

    def test_major_without_major_actions(self, make_binding, workflow_service, page, editor):
        """Test the major button is added to the list itself and no empty menu is shown."""
        workflow_service.definitions_for = [create_definition(initial_action_title="Submit")]
        actions = FieldList()

        make_binding(page, editor).update_cms_actions(actions)

        assert len(actions.children) == 1
        assert isinstance(actions.children[0], FormAction)
        assert actions.children[0].title == "Submit"

    def test_transitions_menu_created(self, make_binding, workflow_service, page, editor):
        """Test content without an action menu gets one for the transitions."""
        workflow_service.instance = create_instance(
            action=create_action_instance(transitions=[
                create_transition("Approve"),
                create_transition("Reject", executable=False),
            ])
        )
        actions = FieldList()

        make_binding(page, editor).update_cms_actions(actions)

        menu = actions.field_by_name("ActionMenus")
        assert isinstance(menu, TabSet)
        assert "action-menus" in menu.extra_classes
        options = actions.field_by_name("ActionMenus.WorkflowOptions")
        assert options.title == "Workflow options"
        assert [button.title for button in options.children] == ["Approve"]

    def test_instance_between_actions(self, make_binding, workflow_service, page, editor):
        workflow_service.instance = create_instance(action=None)
        actions = FieldList()

        make_binding(page, editor).update_cms_actions(actions)

        assert actions.children == []

    def test_existing_workflow_options_reused(self, make_binding, workflow_service, page, editor):
        workflow_service.instance = create_instance(
            action=create_action_instance(transitions=[create_transition("Approve")])
        )
        actions = FieldList(children=[
            TabSet(name="ActionMenus", children=[Tab(name="WorkflowOptions")]),
        ])

        make_binding(page, editor).update_cms_actions(actions)

        assert actions.field_by_name("ActionMenus").names() == ["WorkflowOptions"]


class TestUpdateFields:
    """Test the workflow configuration fields."""

    def test_unsaved_content(self, make_binding, workflow_admin):
        fields = FieldList()
        page = FakePage()
        page.id = 0
        make_binding(page, workflow_admin).update_fields(fields)
        assert fields.children == []

    def test_definition_fields_for_admin(self, make_binding, workflow_service, workflow_admin):
        primary = create_definition(title="Review")
        extra = create_definition(title="Legal")
        workflow_service.all_definitions = [primary, extra]
        page = FakePage(definition=primary, additional=[extra])
        fields = FieldList(children=[TabSet(name="Root")])

        make_binding(page, workflow_admin).update_fields(fields)

        dropdown = fields.field_by_name("Root.Workflow.WorkflowDefinitionID")
        assert isinstance(dropdown, DropdownField)
        assert dropdown.source == {str(primary.id): "Review", str(extra.id): "Legal"}
        assert dropdown.empty_string == "Inherit from parent"
        assert dropdown.value == str(primary.id)
        assert dropdown.value in dropdown.source

        listbox = fields.field_by_name("Root.Workflow.AdditionalWorkflowDefinitions")
        assert isinstance(listbox, ListboxField)
        assert listbox.source == {str(extra.id): "Legal"}
        assert listbox.value == [str(extra.id)]

    def test_no_additional_without_direct_definition(
        self, make_binding, workflow_service, page, workflow_admin
    ):
        workflow_service.all_definitions = [create_definition()]
        fields = FieldList()

        make_binding(page, workflow_admin).update_fields(fields)

        assert fields.names() == ["WorkflowDefinitionID"]
        assert fields.field_by_name("WorkflowDefinitionID").value is None

    def test_definition_fields_need_permission(self, make_binding, workflow_service, page, editor):
        workflow_service.all_definitions = [create_definition()]
        fields = FieldList()

        make_binding(page, editor).update_fields(fields)

        assert fields.children == []

    def test_effective_workflow(self, make_binding, workflow_service, page, editor):
        workflow_service.instance = create_instance(definition=create_definition(title="Review"))
        fields = FieldList()

        make_binding(page, editor).update_fields(fields)

        effective = fields.field_by_name("EffectiveWorkflow")
        assert isinstance(effective, ReadonlyField)
        assert effective.value == "Review"

    def test_workflow_log(self, make_binding, db_session, editor):
        page = FakePage(3)
        db_session.add(WorkflowInstanceRecord(title="Review", target_class="FakePage", target_id=3))
        db_session.flush()
        fields = FieldList()

        make_binding(
            page, editor, instance_repository=WorkflowInstanceRepository(db_session)
        ).update_fields(fields)

        log = fields.field_by_name("WorkflowLog")
        assert isinstance(log, WorkflowLogField)
        assert [record["title"] for record in log.records] == ["Review"]

    def test_custom_labels(self, make_binding, workflow_service, page, workflow_admin):
        config = OverlayConfig(labels=LabelConfig(applied_workflow="Workflow"))
        workflow_service.all_definitions = [create_definition()]
        fields = FieldList()

        make_binding(page, workflow_admin, config=config).update_fields(fields)

        assert fields.field_by_name("WorkflowDefinitionID").title == "Workflow"

    def test_cms_fields_adds_trigger_field(self, make_binding, workflow_service, page, workflow_admin):
        workflow_service.all_definitions = [create_definition()]
        fields = FieldList()

        make_binding(page, workflow_admin).update_cms_fields(fields)

        assert fields.names() == ["WorkflowDefinitionID", "TriggeredWorkflowID"]

    def test_cms_fields_with_settings_form(self, make_binding, workflow_service, workflow_admin):
        """Test content with a settings form only gets the trigger field."""
        workflow_service.all_definitions = [create_definition()]
        fields = FieldList()

        make_binding(PageWithSettings(), workflow_admin).update_cms_fields(fields)

        assert fields.names() == ["TriggeredWorkflowID"]

    def test_settings_fields(self, make_binding, workflow_service, workflow_admin):
        workflow_service.all_definitions = [create_definition()]
        fields = FieldList()

        make_binding(PageWithSettings(), workflow_admin).update_settings_fields(fields)

        assert fields.names() == ["WorkflowDefinitionID"]
