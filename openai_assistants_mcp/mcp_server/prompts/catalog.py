"""
Prompt catalog - message templates served via prompts/*.

Each prompt declares its arguments; rendering fills a ``str.format``
template from the given values, falling back to each argument's default.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from mcp.types import GetPromptResult, Prompt, PromptArgument, PromptMessage, TextContent

from ...errors import PromptArgumentError, PromptNotFoundError, RegistrationError

logger = logging.getLogger(__name__)

CATEGORIES = ("assistant", "thread", "analysis", "run", "data")
NAME_PATTERN = re.compile(r"^[a-z][a-z0-9]*(-[a-z0-9]+)*$")
PLACEHOLDER_PATTERN = re.compile(r"\{(\w+)\}")


@dataclass(frozen=True)
class PromptArgumentSpec:
    """
    One prompt argument.

    ``default`` fills the template when an optional argument is omitted.
    ``section`` is a format string (with ``{value}``) used instead of the
    bare value, and only when the argument is given. ``suggestions`` feed
    argument completion.
    """

    name: str
    description: str
    required: bool = False
    default: str = ""
    section: Optional[str] = None
    suggestions: Tuple[str, ...] = ()

    def to_mcp(self) -> PromptArgument:
        return PromptArgument(name=self.name, description=self.description, required=self.required)


@dataclass(frozen=True)
class PromptEntry:
    name: str
    title: str
    description: str
    category: str
    template: str = field(repr=False)
    arguments: Tuple[PromptArgumentSpec, ...] = ()
    tags: Tuple[str, ...] = ()

    def get_argument(self, name: str) -> Optional[PromptArgumentSpec]:
        for argument in self.arguments:
            if argument.name == name:
                return argument
        return None

    def to_mcp(self) -> Prompt:
        """MCP prompt descriptor."""
        return Prompt(
            name=self.name,
            title=self.title,
            description=self.description,
            arguments=[argument.to_mcp() for argument in self.arguments],
        )

    def render(self, args: Dict[str, Any]) -> str:
        """
        Fill the template.

        Raises:
            PromptArgumentError: For missing required, unknown or non-string arguments
        """
        problems = []
        missing = []
        declared = {argument.name for argument in self.arguments}

        for argument in self.arguments:
            if argument.required and not args.get(argument.name):
                missing.append(argument.name)
                problems.append(f"Missing required argument: {argument.name}")
        for name, value in args.items():
            if name not in declared:
                problems.append(f"Unknown argument: {name}")
            elif not isinstance(value, str):
                problems.append(f"Argument {name} must be a string")
        if problems:
            raise PromptArgumentError(self.name, problems, missing)

        values = {}
        for argument in self.arguments:
            given = args.get(argument.name)
            if argument.section is not None:
                values[argument.name] = argument.section.format(value=given) if given else ""
            else:
                values[argument.name] = given or argument.default
        return self.template.format(**values)


def _arg(name: str, description: str, **kwargs) -> PromptArgumentSpec:
    return PromptArgumentSpec(name=name, description=description, **kwargs)


LANGUAGE = _arg(
    "language",
    "Programming language",
    default="auto-detect",
    suggestions=("python", "javascript", "typescript", "go", "rust", "java", "sql", "bash"),
)

PROMPT_DEFINITIONS: List[PromptEntry] = [
    PromptEntry(
        name="create-coding-assistant",
        title="Create Coding Assistant",
        description="Generate a specialized coding assistant with custom instructions and tools",
        category="assistant",
        tags=("coding", "development", "assistant"),
        arguments=(
            _arg(
                "specialization",
                'Programming specialization (e.g., "Python web development", "React frontend", "DevOps")',
                required=True,
                suggestions=(
                    "Python web development",
                    "React frontend development",
                    "Node.js backend development",
                    "DevOps and infrastructure",
                    "Mobile app development",
                    "Machine learning and AI",
                    "Database design and optimization",
                    "API development and integration",
                    "Cloud architecture",
                    "Data engineering",
                ),
            ),
            _arg(
                "experience_level",
                "Target experience level (beginner, intermediate, expert)",
                default="intermediate",
                suggestions=("beginner", "intermediate", "expert"),
            ),
            _arg(
                "additional_tools",
                "Additional tools to enable (code_interpreter, file_search)",
                default="code_interpreter",
                suggestions=("code_interpreter", "file_search", "code_interpreter, file_search"),
            ),
        ),
        template=(
            "Create a specialized coding assistant for {specialization}. The assistant should be designed "
            "for {experience_level} developers and include {additional_tools} tools. Please provide the "
            "complete assistant configuration including name, description, instructions, and tools array."
        ),
    ),
    PromptEntry(
        name="create-data-analyst",
        title="Create Data Analyst Assistant",
        description="Generate a data analysis assistant with statistical and visualization capabilities",
        category="assistant",
        tags=("data", "analytics", "statistics", "assistant"),
        arguments=(
            _arg(
                "domain",
                'Data analysis domain (e.g., "business intelligence", "scientific research", "marketing")',
                required=True,
                suggestions=("business intelligence", "scientific research", "marketing", "finance", "operations"),
            ),
            _arg(
                "tools_focus",
                "Primary tools focus (python, r, sql, visualization)",
                default="python",
                suggestions=("python", "r", "sql", "visualization"),
            ),
        ),
        template=(
            "Create a data analyst assistant specialized in {domain} with a focus on {tools_focus}. The "
            "assistant should be capable of data analysis, statistical modeling, and creating visualizations. "
            "Include appropriate tools and detailed instructions for data analysis workflows."
        ),
    ),
    PromptEntry(
        name="create-writing-assistant",
        title="Create Writing Assistant",
        description="Generate a professional writing assistant for content creation and editing",
        category="assistant",
        tags=("writing", "content", "editing", "assistant"),
        arguments=(
            _arg(
                "writing_type",
                'Type of writing (e.g., "technical documentation", "marketing copy", "academic papers")',
                required=True,
                suggestions=(
                    "blog posts",
                    "technical documentation",
                    "marketing copy",
                    "academic papers",
                    "email campaigns",
                    "product descriptions",
                ),
            ),
            _arg(
                "tone",
                "Preferred writing tone (professional, casual, academic, creative)",
                default="professional",
                suggestions=("professional", "casual", "academic", "creative"),
            ),
            _arg(
                "audience",
                "Target audience (general public, technical experts, students, customers)",
                default="general public",
                suggestions=("general public", "technical experts", "students", "customers"),
            ),
        ),
        template=(
            "Create a writing assistant specialized in {writing_type} with a {tone} tone for {audience}. "
            "The assistant should help with content creation, editing, proofreading, and style optimization. "
            "Include file_search tools for research capabilities."
        ),
    ),
    PromptEntry(
        name="create-conversation-thread",
        title="Create Conversation Thread",
        description="Set up a new conversation thread with initial context and metadata",
        category="thread",
        tags=("thread", "conversation", "setup"),
        arguments=(
            _arg(
                "purpose",
                'Purpose of the conversation (e.g., "code review", "data analysis", "writing help")',
                required=True,
                suggestions=("code review", "data analysis", "writing help", "customer support"),
            ),
            _arg("context", "Initial context or background information", section="\n\nContext: {value}"),
            _arg("user_id", "User identifier for tracking", default="anonymous"),
        ),
        template=(
            'Create a new conversation thread for {purpose}. Set up appropriate metadata including user_id: '
            '"{user_id}", session_type: "{purpose}", and timestamp.{context}'
        ),
    ),
    PromptEntry(
        name="organize-thread-messages",
        title="Organize Thread Messages",
        description="Analyze and organize messages in a thread for better conversation flow",
        category="thread",
        tags=("thread", "organization", "messages"),
        arguments=(
            _arg("thread_id", "Thread ID to analyze", required=True),
            _arg(
                "organization_type",
                "How to organize (chronological, by_topic, by_importance)",
                default="chronological",
                suggestions=("chronological", "by_topic", "by_importance"),
            ),
        ),
        template=(
            "Analyze and organize the messages in thread {thread_id} using {organization_type} organization. "
            "Provide a summary of the conversation flow and suggest any improvements for better structure."
        ),
    ),
    PromptEntry(
        name="explain-code",
        title="Explain Code",
        description="Provide detailed explanation of how code works",
        category="analysis",
        tags=("code", "explanation", "education"),
        arguments=(
            _arg("code", "Code to explain", required=True),
            LANGUAGE,
            _arg(
                "detail_level",
                "Level of detail (basic, intermediate, advanced)",
                default="intermediate",
                suggestions=("basic", "intermediate", "advanced"),
            ),
        ),
        template=(
            "Explain how this {language} code works at a {detail_level} level:\n\n```\n{code}\n```\n\n"
            "Break down the logic, explain key concepts, and describe what each part does."
        ),
    ),
    PromptEntry(
        name="review-code",
        title="Code Review",
        description="Perform comprehensive code review with suggestions for improvement",
        category="analysis",
        tags=("code", "review", "quality"),
        arguments=(
            _arg("code", "Code to review", required=True),
            LANGUAGE,
            _arg(
                "focus_areas",
                "Specific areas to focus on (security, performance, readability, best_practices)",
                default="all aspects",
                suggestions=("security", "performance", "readability", "best_practices"),
            ),
        ),
        template=(
            "Please review this {language} code focusing on {focus_areas}:\n\n```\n{code}\n```\n\n"
            "Provide feedback on code quality, potential issues, and suggestions for improvement."
        ),
    ),
    PromptEntry(
        name="configure-assistant-run",
        title="Configure Assistant Run",
        description="Set up optimal run configuration for an assistant based on the task",
        category="run",
        tags=("run", "configuration", "optimization"),
        arguments=(
            _arg(
                "task_type",
                "Type of task (code_review, data_analysis, writing, general_qa)",
                required=True,
                suggestions=("code_review", "data_analysis", "writing", "general_qa"),
            ),
            _arg(
                "complexity",
                "Task complexity (simple, moderate, complex)",
                default="moderate",
                suggestions=("simple", "moderate", "complex"),
            ),
            _arg(
                "time_sensitivity",
                "Time sensitivity (low, medium, high)",
                default="medium",
                suggestions=("low", "medium", "high"),
            ),
        ),
        template=(
            "Configure an optimal assistant run for a {task_type} task with {complexity} complexity and "
            "{time_sensitivity} time sensitivity. Recommend appropriate model, temperature, max_tokens, "
            "and tool_choice settings."
        ),
    ),
    PromptEntry(
        name="debug-run-issues",
        title="Debug Run Issues",
        description="Analyze and troubleshoot assistant run problems",
        category="run",
        tags=("debug", "troubleshooting", "run"),
        arguments=(
            _arg("run_id", "Run ID that has issues", required=True),
            _arg("issue_description", "Description of the observed issue", required=True),
            _arg(
                "run_status",
                "Current run status (failed, cancelled, requires_action, etc.)",
                default="unknown",
                suggestions=("queued", "in_progress", "requires_action", "cancelled", "failed", "expired"),
            ),
        ),
        template=(
            "Debug issues with run {run_id}. Current status: {run_status}. Issue description: "
            "{issue_description}. Analyze the run steps, check for errors, and provide troubleshooting "
            "recommendations."
        ),
    ),
    PromptEntry(
        name="analyze-dataset",
        title="Analyze Dataset",
        description="Perform comprehensive analysis of a dataset",
        category="data",
        tags=("data", "analysis", "statistics"),
        arguments=(
            _arg("dataset_description", "Description of the dataset", required=True),
            _arg("analysis_goals", "What you want to learn from the data", required=True),
            _arg(
                "data_format",
                "Format of the data (CSV, JSON, database, etc.)",
                default="CSV",
                suggestions=("CSV", "JSON", "Parquet", "Excel", "database"),
            ),
        ),
        template=(
            "Analyze this {data_format} dataset: {dataset_description}\n\nAnalysis goals: {analysis_goals}\n\n"
            "Perform exploratory data analysis, identify patterns, and provide insights. Include statistical "
            "summaries and visualizations where appropriate."
        ),
    ),
]


class PromptCatalog:
    """
    Immutable catalog of prompt templates keyed by name.

    Raises ``RegistrationError`` at construction for malformed or duplicate
    names, unknown categories, and templates whose placeholders do not match
    the declared arguments.
    """

    def __init__(self, entries: Optional[List[PromptEntry]] = None):
        self._entries: Dict[str, PromptEntry] = {}
        for entry in entries if entries is not None else PROMPT_DEFINITIONS:
            if not NAME_PATTERN.match(entry.name):
                raise RegistrationError(f"Malformed prompt name: {entry.name}")
            if entry.name in self._entries:
                raise RegistrationError(f"Prompt '{entry.name}' is declared more than once")
            if entry.category not in CATEGORIES:
                raise RegistrationError(f"Prompt '{entry.name}' has unknown category '{entry.category}'")

            placeholders = set(PLACEHOLDER_PATTERN.findall(entry.template))
            declared = {argument.name for argument in entry.arguments}
            if placeholders != declared:
                raise RegistrationError(
                    f"Prompt '{entry.name}' template placeholders {sorted(placeholders)} "
                    f"do not match its arguments {sorted(declared)}"
                )
            self._entries[entry.name] = entry

        logger.debug(f"Registered {len(self._entries)} prompts")

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: str) -> bool:
        return name in self._entries

    def list_prompts(self) -> List[PromptEntry]:
        return list(self._entries.values())

    def list_by_category(self, category: str) -> List[PromptEntry]:
        return [entry for entry in self._entries.values() if entry.category == category]

    def get_entry(self, name: str) -> PromptEntry:
        entry = self._entries.get(name)
        if entry is None:
            raise PromptNotFoundError(name, list(self._entries))
        return entry

    def get_stats(self) -> Dict[str, Any]:
        by_category = {category: len(self.list_by_category(category)) for category in CATEGORIES}
        return {"total": len(self._entries), "by_category": by_category}

    def get_prompt(self, name: str, args: Optional[Dict[str, Any]] = None) -> GetPromptResult:
        """
        Render a prompt into its messages.

        Args:
            name: Prompt name
            args: Argument values, all strings

        Returns:
            GetPromptResult with the prompt description and one user message

        Raises:
            PromptNotFoundError: If no prompt has this name
            PromptArgumentError: If the arguments do not fit the prompt
        """
        entry = self.get_entry(name)
        text = entry.render(args or {})
        return GetPromptResult(
            description=entry.description,
            messages=[PromptMessage(role="user", content=TextContent(type="text", text=text))],
        )
