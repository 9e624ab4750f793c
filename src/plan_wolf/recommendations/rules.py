"""Ordered classification rules for raw phase details.

Each rule pairs a predicate over the raw detail text with a builder that
produces human-readable advice. Rules are evaluated top to bottom and the
first match wins, so more specific rules sit above broader ones (a
``REGRESSION:`` detail may also mention tests or files).
"""

import re
from dataclasses import dataclass
from typing import Callable, Optional


@dataclass(frozen=True)
class Advice:
    category: str
    title: str
    explain: str
    action: str
    impact: str
    force_high: bool = False


Predicate = Callable[[str], bool]
Builder = Callable[[str, str], Advice]


@dataclass(frozen=True)
class Rule:
    category: str
    predicate: Predicate
    builder: Builder

    def matches(self, detail: str) -> bool:
        return self.predicate(detail)


def contains(*needles: str) -> Predicate:
    """Case-insensitive match on any of ``needles``."""
    lowered = tuple(n.lower() for n in needles)

    def predicate(detail: str) -> bool:
        text = detail.lower()
        return any(n in text for n in lowered)

    return predicate


def all_of(*predicates: Predicate) -> Predicate:
    def predicate(detail: str) -> bool:
        return all(p(detail) for p in predicates)

    return predicate


def static(
    category: str, title: str, explain: str, action: str, impact: str, force_high: bool = False
) -> Builder:
    def builder(phase_name: str, detail: str) -> Advice:
        return Advice(category, title, explain, action, impact, force_high)

    return builder


def _listed_names(detail: str) -> str:
    """The comma list after the last colon of a detail, if any."""
    m = re.search(r":\s*([^:]+)$", detail)
    return m.group(1).strip() if m else "(see details)"


def _orphaned_code(phase_name: str, detail: str) -> Advice:
    return Advice(
        "orphaned_code",
        "Code that users can never reach",
        "These services or handlers exist but nothing imports or calls them, so no "
        f"screen or button exposes them: {_listed_names(detail)}.",
        "Either delete the unused files, or wire them into the app with the buttons "
        "or screens they need.",
        "Deleting makes the codebase lighter; wiring them in ships features that are "
        "already written.",
    )


def _dangling_handler(phase_name: str, detail: str) -> Advice:
    m = re.search(r"handler\(?s?\)?\s+([\w$, ]+?)(?:\(\))?(?:\s+referenced|$)", detail)
    name = m.group(1).strip() if m else "a handler"
    return Advice(
        "dangling_handler",
        "Buttons call a handler that does not exist",
        f"Markup calls {name} but no file registers it on the global object, so the "
        "click throws at runtime and nothing happens for the user.",
        "Register the handler (window.name = ...) in the module that owns the feature, "
        "or fix the name in the markup.",
        "Every button does what it says.",
        force_high=True,
    )


def _fallback(phase_name: str, detail: str) -> Advice:
    return Advice(
        "other",
        f"[{phase_name}] {detail[:60]}",
        "The audit found a problem in this phase.",
        "Investigate the detail above.",
        f"Raises the {phase_name} score.",
    )


RULES: list[Rule] = [
    Rule(
        "regression",
        contains("regression:"),
        static(
            "regression",
            "A previously fixed bug is back",
            "A defect that was fixed in an earlier run fails its check again. This "
            "usually means a recent change undid the fix.",
            "Read the regression detail and restore the fix.",
            "The feature works again as it did before.",
            force_high=True,
        ),
    ),
    Rule("dangling_handler", contains("dangling"), _dangling_handler),
    Rule(
        "duplicate_handler",
        contains("duplicate handler"),
        static(
            "duplicate_handler",
            "The same handler is defined in several files",
            "Two files assign the same global handler. Whichever loads last silently "
            "wins, so one of the implementations never runs.",
            "Keep one definition and delete or rename the others, or guard the "
            "fallback with if (!window.name).",
            "The handler behaves the same regardless of load order.",
        ),
    ),
    Rule(
        "cyclic_import",
        contains("import cycle", "circular"),
        static(
            "cyclic_import",
            "Files import each other in a loop",
            "Circular imports make module initialisation order-dependent; a value can be "
            "undefined when first read.",
            "Move the shared code into a third module that both files import.",
            "Predictable startup and easier refactoring.",
        ),
    ),
    Rule(
        "missing_close_handler",
        contains("close handler"),
        static(
            "missing_close_handler",
            "Some popups cannot be closed",
            "These modals have an open handler but no matching close handler; a user who "
            "opens one can get stuck.",
            "Add a window.closeXxx handler for every modal that lacks one.",
            "Users can dismiss every popup.",
        ),
    ),
    Rule(
        "security",
        contains("security", "csp", "sanitiz"),
        static(
            "security",
            "Missing web security protections",
            "Protections against code injection and data theft are not in place.",
            "Add a Content-Security-Policy to index.html and sanitize any HTML built "
            "from user input.",
            "Users are protected against the most common web attacks.",
            force_high=True,
        ),
    ),
    Rule(
        "legal",
        contains("legal", "privacy", "terms.md", "cookie"),
        static(
            "legal",
            "Legal or privacy requirements are not met",
            "The app needs terms of use, a privacy policy, a cookie banner and a "
            "registry of stored personal data to comply with privacy law.",
            "Add the missing documents or components and rerun the privacy lint.",
            "The site is compliant and earns user trust.",
            force_high=True,
        ),
    ),
    Rule(
        "broken_build",
        all_of(contains("build"), contains("fail", "does not compile")),
        static(
            "broken_build",
            "The production build is broken",
            "The site cannot be rebuilt, so no change can be deployed until this is fixed.",
            "Run the build command locally and fix the first error it reports.",
            "Deployments work again.",
            force_high=True,
        ),
    ),
    Rule(
        "missing_test_coverage",
        contains("without a matching unit test", "untested"),
        static(
            "missing_test_coverage",
            "Changed files have no tests",
            "Recently changed files have no matching test file, so a mistake in them "
            "would go unnoticed.",
            "Add a <name>.test.js next to the existing tests for each changed file.",
            "Future changes to these files are caught by the test suite.",
        ),
    ),
    Rule(
        "failing_tests",
        all_of(contains("test"), contains("fail")),
        static(
            "failing_tests",
            "Tests are failing",
            "Automated tests report problems; a feature is probably broken.",
            "Run the test suite, read the first failure and fix it.",
            "Every feature behaves as specified.",
            force_high=True,
        ),
    ),
    Rule(
        "i18n",
        contains("i18n", "translat", "language file"),
        static(
            "i18n",
            "Missing translations",
            "Some text is not translated into every supported language, so part of the "
            "audience sees another language.",
            "Run the i18n lint to list missing keys and add them; wrap literal UI text in t().",
            "Every user sees the app in their language.",
        ),
    ),
    Rule(
        "lint",
        contains("eslint", "lint problem", "--fix"),
        static(
            "lint",
            "Automatic code cleanup",
            "The linter reports style problems such as unused variables. Nothing breaks "
            "yet, but the code is harder to maintain.",
            "Run the linter with --fix; most problems are corrected automatically.",
            "Cleaner code and a full Code Quality score.",
        ),
    ),
    Rule(
        "dead_code",
        contains("dead export", "dead local function"),
        static(
            "dead_code",
            "Unused code",
            "These exports or functions are never imported or called anywhere in the "
            "tree, tests and scripts included.",
            "Delete them, or import them where they were meant to be used.",
            "Less code to read, test and ship.",
        ),
    ),
    Rule("orphaned_code", contains("orphan", "never imported", "unplugged"), _orphaned_code),
    Rule(
        "oversized_asset",
        contains("oversized asset"),
        static(
            "oversized_asset",
            "A build asset is very large",
            "A single image, font or data file weighs more than the whole recommended "
            "bundle, which slows every first visit.",
            "Compress or resize the asset, or load it lazily.",
            "Faster first load, especially on mobile networks.",
        ),
    ),
    Rule(
        "bundle_size",
        contains("bundle", "chunk", "kb", "performance score"),
        static(
            "bundle_size",
            "The app is heavy to load",
            "The main bundle is over the recommended size; on a slow connection the "
            "app takes a long time to appear.",
            "Remove unused imports and split rarely used screens into lazy chunks.",
            "The app loads faster on old phones and slow networks.",
        ),
    ),
    Rule(
        "seo",
        contains("seo", "sitemap", "robots.txt"),
        static(
            "seo",
            "The site is hard to find in search engines",
            "Search engines need a sitemap, a robots.txt and indexable content pages to "
            "list the site.",
            "Generate the missing sitemap/robots files and static content pages.",
            "More visitors from search without paid ads.",
        ),
    ),
    Rule(
        "accessibility",
        contains("accessibility", "a11y", "aria"),
        static(
            "accessibility",
            "Improve accessibility",
            "Screen-reader and keyboard users may not be able to use parts of the app.",
            "Add the missing ARIA attributes and check keyboard focus handling.",
            "The app is usable by everyone.",
        ),
    ),
    Rule(
        "stale_metric",
        contains("stale"),
        static(
            "stale_metric",
            "The feature checklist is out of date",
            "The checklist marks features as done whose code is no longer in the tree.",
            "Update the checklist to match the code, or restore the missing files.",
            "The inventory can be trusted again.",
        ),
    ),
    Rule(
        "locked_content",
        contains("dead link", "file missing", "cannot be found", "unreachable"),
        static(
            "locked_content",
            "Content users cannot reach",
            "A declared feature or linked page cannot be found, so users hit a dead end.",
            "Restore the missing file or fix the link that points to it.",
            "Every advertised feature and page is reachable.",
        ),
    ),
    Rule(
        "unfinished_placeholder",
        contains("todo", "fixme", "empty function", "placeholder"),
        static(
            "unfinished_placeholder",
            "Unfinished code in recent changes",
            "Changed files still contain TODO markers or empty function bodies, a sign "
            "the feature was shipped half done.",
            "Finish or remove the placeholders before the next release.",
            "No half-built behaviour reaches users.",
        ),
    ),
    Rule(
        "competitive_gap",
        contains("unchecked", "still pending", "competitor"),
        static(
            "competitive_gap",
            "Planned features are still missing",
            "The feature checklist lists items that are not done yet.",
            "Pick the most requested pending feature and schedule it.",
            "The product keeps pace with what users expect.",
        ),
    ),
    Rule(
        "recent_change",
        contains("changed file", "critical file", "consider splitting", "affects"),
        static(
            "recent_change",
            "A recent change has a wide blast radius",
            "Recently changed files are critical or imported by many others, so a bug "
            "there can break distant features.",
            "Run the full test suite and click through the affected screens.",
            "Side effects of the change are caught before users see them.",
        ),
    ),
]


def classify(phase_name: str, detail: str, rules: Optional[list[Rule]] = None) -> Advice:
    """Advice from the first matching rule, or the generic fallback."""
    for rule in rules if rules is not None else RULES:
        if rule.matches(detail):
            return rule.builder(phase_name, detail)
    return _fallback(phase_name, detail)
