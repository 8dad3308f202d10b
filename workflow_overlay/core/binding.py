"""Workflow applicability binding.

Content objects implementing WorkflowApplicableContent can have a workflow
definition applied to them. An ApplicabilityBinding is created for one
content object for the duration of one request and gives the host CMS:

- edit/publish authorization overrides
- the workflow buttons and configuration fields for the edit form
- the after-write notification into the running workflow
- links and comments used by workflow notification templates
"""

import logging
from typing import Callable, Optional, Sequence

from workflow_overlay.common.config import OverlayConfig
from workflow_overlay.common.urls import join_links
from workflow_overlay.db.repository import WorkflowInstanceRepository, record_to_dict
from workflow_overlay.schemas.actions import WorkflowActions
from workflow_overlay.schemas.fields import (
    CompositeField,
    DropdownField,
    FieldList,
    FormAction,
    HiddenField,
    ListboxField,
    ReadonlyField,
    Tab,
    TabSet,
    WorkflowLogField,
)

from .config import Settings, get_settings
from .contracts import (
    Actor,
    CMSPreviewable,
    ContentIdentity,
    WorkflowActionInstance,
    WorkflowApplicableContent,
    WorkflowInstance,
    WorkflowLinkable,
    WorkflowService,
)
from .jobs import JobConcurrencyGuard
from .menu import WORKFLOW_OPTIONS, TransitionMenuBuilder
from .overlay import PermissionOverlay
from .rbac import has_permission
from .resolver import WorkflowResolver

logger = logging.getLogger(__name__)

ACTION_MENUS = "ActionMenus"
MAJOR_ACTIONS = "MajorActions"
MORE_OPTIONS = "MoreOptions"


class ApplicabilityBinding:
    """
    Workflow behaviour bound to a single content object.

    The effective workflow instance is looked up on first use and kept for
    the binding's lifetime. Bindings are not meant to be shared between
    requests or threads.
    """

    def __init__(
        self,
        content: WorkflowApplicableContent,
        workflow_service: WorkflowService,
        *,
        job_guard: JobConcurrencyGuard,
        current_user: Callable[[], Optional[Actor]] = lambda: None,
        instance_repository: Optional[WorkflowInstanceRepository] = None,
        settings: Optional[Settings] = None,
        config: Optional[OverlayConfig] = None,
    ):
        """
        Args:
            content: The content object the workflow applies to
            workflow_service: Workflow engine lookups
            job_guard: Scheduled publishing guard, shared by the process
            current_user: Returns the authenticated actor, or None
            instance_repository: Identity query over workflow instance records
            settings: Environment settings (base URL for links)
            config: Overlay configuration (labels, tab, comment limit)
        """
        self.content = content
        self.workflow_service = workflow_service
        self.current_user = current_user
        self.instance_repository = instance_repository
        self.settings = settings or get_settings()
        self.config = config or OverlayConfig()

        self.resolver = WorkflowResolver(workflow_service, content)
        self.overlay = PermissionOverlay(self.resolver, job_guard)
        self.menu = TransitionMenuBuilder(
            self.resolver, options_title=self.config.labels.workflow_options
        )

    @property
    def identity(self) -> ContentIdentity:
        return ContentIdentity.of(self.content)

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def workflow_instance(self) -> Optional[WorkflowInstance]:
        """The current instance of workflow, looked up once."""
        return self.resolver.resolve()

    def workflow_history(self, limit: Optional[int] = None) -> Sequence[WorkflowActionInstance]:
        return self.resolver.history(limit)

    def workflow_instances(self):
        """Every workflow instance that targeted this content object."""
        if self.instance_repository is None:
            raise RuntimeError("No workflow instance repository configured")
        return self.instance_repository.for_target(self.identity)

    # ------------------------------------------------------------------
    # Authorization
    # ------------------------------------------------------------------

    def can_edit(self, actor: Optional[Actor] = None) -> Optional[bool]:
        return self.overlay.can_edit(actor)

    def can_publish(self) -> Optional[bool]:
        return self.overlay.can_publish(self.current_user())

    def can_edit_workflow(self) -> bool:
        return self.overlay.can_edit_workflow()

    def prevent_scheduled_publish_jobs(self) -> bool:
        """
        Should the scheduled publishing subsystem refrain from queueing jobs?

        A running instance, or any applicable definition, queues its own jobs
        once the workflow gets there.
        """
        if self.workflow_instance() is not None:
            return True
        return self.resolver.resolve_definition() is not None

    # ------------------------------------------------------------------
    # Persistence hook
    # ------------------------------------------------------------------

    def on_after_write(self) -> None:
        """Notify the running workflow that its target was written."""
        instance = self.workflow_instance()
        if instance is None or not instance.current_action_id:
            return

        logger.info(f"Notifying workflow instance {instance.id} that {self.identity} was updated")
        instance.current_action().base_action().target_updated(instance)

    # ------------------------------------------------------------------
    # Template helpers
    # ------------------------------------------------------------------

    def recent_workflow_comment(self, limit: Optional[int] = None) -> Optional[WorkflowActionInstance]:
        """The most recent workflow action carrying a comment, if any."""
        if limit is None:
            limit = self.config.recent_comment_limit

        for action in self.workflow_history(limit):
            if action.comment:
                return action
        return None

    def absolute_edit_link(self) -> Optional[str]:
        """Absolute link to the CMS editor for the content, if it has one."""
        edit_link = None
        if isinstance(self.content, CMSPreviewable):
            edit_link = self.content.cms_edit_link()
        elif isinstance(self.content, WorkflowLinkable):
            edit_link = self.content.workflow_link()

        if edit_link is None:
            return None
        return join_links(self.settings.absolute_base_url, edit_link)

    def link_to_pending_items(self) -> Optional[str]:
        """Absolute link to the transition selection for the running instance."""
        instance = self.workflow_instance()
        if instance is None:
            return None
        return join_links(
            self.settings.absolute_base_url,
            self.config.pending_items_path,
            "PendingObjects",
            "item",
            str(instance.id),
            "edit",
        )

    # ------------------------------------------------------------------
    # CMS form hooks
    # ------------------------------------------------------------------

    def build_actions(self) -> WorkflowActions:
        return self.menu.build_actions(self.current_user())

    def update_settings_fields(self, fields: FieldList) -> None:
        self.update_fields(fields)

    def update_cms_fields(self, fields: FieldList) -> None:
        # Content with a settings form gets the workflow fields there instead
        if not hasattr(self.content, "settings_fields"):
            self.update_fields(fields)

        # Carries the definition picked with a start-workflow button
        fields.push(HiddenField(name="TriggeredWorkflowID"))

    def update_fields(self, fields: FieldList) -> None:
        """Add the workflow configuration fields for saved content."""
        if not self.content.id:
            return

        labels = self.config.labels
        if fields.field_by_name("Root") is not None:
            tab: CompositeField = fields.find_or_make_tab(self.config.workflow_tab)
        else:
            tab = fields

        if has_permission(self.current_user(), self.config.apply_permission):
            selected = self.content.workflow_definition_id
            definitions = {
                str(definition.id): definition.title
                for definition in self.workflow_service.get_definitions()
            }
            tab.push(DropdownField(
                name="WorkflowDefinitionID",
                title=labels.applied_workflow,
                value=str(selected) if selected else None,
                source=dict(definitions),
                empty_string=labels.inherit_from_parent,
            ))

            # Additional definitions are only offered next to a direct one
            if selected:
                fields.remove_by_name("AdditionalWorkflowDefinitions")
                definitions.pop(str(selected), None)
                tab.push(ListboxField(
                    name="AdditionalWorkflowDefinitions",
                    title=labels.additional_workflows,
                    value=[
                        str(definition.id)
                        for definition in self.content.additional_workflow_definitions()
                    ],
                    source=definitions,
                ))

        effective = self.workflow_instance()
        if effective is not None:
            tab.push(ReadonlyField(
                name="EffectiveWorkflow",
                title=labels.effective_workflow,
                value=effective.definition.title,
            ))

        if self.instance_repository is not None:
            tab.push(WorkflowLogField(
                name="WorkflowLog",
                title=labels.workflow_log,
                records=[record_to_dict(record) for record in self.workflow_instances()],
            ))

    def update_cms_actions(self, actions: FieldList) -> None:
        """Add the workflow buttons to the host form's actions."""
        built = self.build_actions()
        if built.is_empty:
            return

        if built.major is not None:
            button = self._form_action(built.major)
            major_actions = actions.field_by_name(MAJOR_ACTIONS)
            if isinstance(major_actions, CompositeField):
                major_actions.push(button)
            else:
                actions.push(button)

        for group in built.groups:
            if not group.items:
                continue
            menu = self._action_menu(actions)
            if group.name == WORKFLOW_OPTIONS:
                tab = menu.field_by_name(WORKFLOW_OPTIONS)
                if not isinstance(tab, CompositeField):
                    tab = menu.push(Tab(name=WORKFLOW_OPTIONS, title=group.title))
            else:
                tab = menu.insert_before(MORE_OPTIONS, Tab(name=group.name, title=group.title))
            for item in group.items:
                tab.push(self._form_action(item))

    def _action_menu(self, actions: FieldList) -> CompositeField:
        menu = actions.field_by_name(ACTION_MENUS)
        if isinstance(menu, CompositeField):
            return menu

        # Non-page content has no action menu of its own
        menu = TabSet(name=ACTION_MENUS, extra_classes=["ss-ui-action-tabset", "action-menus"])
        actions.push(menu)
        return menu

    @staticmethod
    def _form_action(item) -> FormAction:
        return FormAction(
            name=item.name,
            title=item.title,
            extra_classes=list(item.extra_classes),
            attributes=dict(item.attributes),
        )

