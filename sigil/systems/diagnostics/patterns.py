"""
Sigil — Known Diagnostic Patterns

Curated catalog of common UI issues: symptom phrases users report, keywords
that point at the pattern, and ranked causes with fixes.

Catalog order is curation priority. The matcher keeps it for equal-confidence
results, and each pattern's causes are listed most likely first.
"""

from __future__ import annotations

from sigil.systems.diagnostics.types import (
    DiagnosticPattern,
    PatternCategory,
    PatternCause,
    Severity,
)

PATTERNS: tuple[DiagnosticPattern, ...] = (
    # ── Hydration ──
    DiagnosticPattern(
        id="hydration-media-query",
        name="useMediaQuery Hydration Mismatch",
        category=PatternCategory.HYDRATION,
        severity=Severity.ERROR,
        symptoms=(
            "Text content does not match server-rendered HTML",
            "Hydration failed because the initial UI does not match",
            "Component flickers on load",
            "Different content on refresh vs navigation",
        ),
        keywords=("hydration", "flicker", "mismatch", "ssr", "server"),
        causes=(
            PatternCause(
                name="useMediaQuery SSR mismatch",
                signature="useMediaQuery returns false on server, true on client",
                example=(
                    'const isDesktop = useMediaQuery("(min-width: 768px)");\n'
                    "return isDesktop ? <Dialog /> : <Drawer />;"
                ),
                solution=(
                    "// Option 1: render a placeholder until mounted\n"
                    "const [mounted, setMounted] = useState(false);\n"
                    "useEffect(() => setMounted(true), []);\n"
                    "if (!mounted) return <Skeleton />;\n"
                    "\n"
                    "// Option 2: CSS-only responsive layout\n"
                    '<div className="hidden md:block"><Dialog /></div>\n'
                    '<div className="md:hidden"><Drawer /></div>'
                ),
            ),
            PatternCause(
                name="Date/time in render",
                signature="new Date() in render path",
                example="return <span>{new Date().toLocaleString()}</span>",
                solution=(
                    "const [time, setTime] = useState<string | null>(null);\n"
                    "useEffect(() => setTime(new Date().toLocaleString()), []);\n"
                    "return <span>{time ?? 'Loading...'}</span>;"
                ),
            ),
            PatternCause(
                name="Random values in render",
                signature="Math.random() or crypto.randomUUID() in render",
                solution=(
                    "// Stable ids across server and client\n"
                    "const id = useId();\n"
                    "\n"
                    "// Or generate once\n"
                    "const [randomId] = useState(() => crypto.randomUUID());"
                ),
            ),
        ),
    ),
    # ── Dialogs ──
    DiagnosticPattern(
        id="dialog-instability",
        name="Dialog/Modal Instability",
        category=PatternCategory.DIALOG,
        severity=Severity.ERROR,
        symptoms=(
            "Dialog doesn't open reliably",
            "Visual glitch during open/close",
            "Works on desktop, fails on mobile",
            "Absolute positioned elements misaligned",
            "Content jumps or shifts",
        ),
        keywords=("dialog", "modal", "drawer", "glitch", "popup", "open", "close"),
        causes=(
            PatternCause(
                name="ResponsiveDialog hydration",
                signature="useMediaQuery controlling Dialog vs Drawer",
                solution=(
                    "// Option 1: CSS container queries\n"
                    ".dialog-content {\n"
                    "  @container (min-width: 768px) { /* desktop styles */ }\n"
                    "}\n"
                    "\n"
                    "// Option 2: consistent loading state\n"
                    "if (!mounted) return <DialogSkeleton />;"
                ),
            ),
            PatternCause(
                name="Absolute positioning context mismatch",
                signature="absolute positioning with varying parent chains",
                example='<div className="absolute -top-4">Title</div>',
                solution=(
                    "// Give the element an explicit positioning context\n"
                    '<div className="relative">\n'
                    '  <div className="absolute -top-4">Title</div>\n'
                    "</div>"
                ),
            ),
            PatternCause(
                name="CSS overflow conflicts",
                signature="overflow-auto on parent, overflow-visible on child",
                solution=(
                    "// Set overflow explicitly at each level, or restructure\n"
                    "// the tree so parent and child do not disagree"
                ),
            ),
        ),
    ),
    # ── Performance ──
    DiagnosticPattern(
        id="render-performance",
        name="Render Performance Issues",
        category=PatternCategory.PERFORMANCE,
        severity=Severity.WARNING,
        symptoms=(
            "Laggy interactions",
            "Delayed response to clicks",
            "Janky animations",
            "UI feels heavy",
            "High INP",
        ),
        keywords=("slow", "laggy", "janky", "performance", "heavy", "delay"),
        causes=(
            PatternCause(
                name="Unnecessary re-renders",
                signature="Large component tree re-rendering on state change",
                solution=(
                    "// Memoize expensive children\n"
                    "const MemoizedChild = memo(Child);\n"
                    "\n"
                    "// Colocate state and memoize derived data\n"
                    "const processed = useMemo(() => expensiveWork(data), [data]);"
                ),
            ),
            PatternCause(
                name="Layout thrashing",
                signature="Reading layout, writing, reading again",
                solution=(
                    "// Batch reads, then batch writes inside requestAnimationFrame.\n"
                    "// Animate transforms instead of top/left."
                ),
            ),
        ),
    ),
    # ── Layout shift ──
    DiagnosticPattern(
        id="layout-shift",
        name="Cumulative Layout Shift (CLS)",
        category=PatternCategory.LAYOUT,
        severity=Severity.WARNING,
        symptoms=(
            "Content jumps after load",
            "Buttons move as clicking",
            "High CLS score",
            "Page is jumpy",
        ),
        keywords=("jump", "shift", "cls", "move", "jumpy"),
        causes=(
            PatternCause(
                name="Images without dimensions",
                signature="<img> without width/height",
                solution=(
                    '<Image src={src} width={400} height={300} alt="..." />\n'
                    "\n"
                    "// Or reserve the box with aspect-ratio\n"
                    '<div className="aspect-video"><img className="object-cover" /></div>'
                ),
            ),
            PatternCause(
                name="Dynamic content without placeholder",
                signature="Content loads and pushes things down",
                solution=(
                    '<div className="min-h-[200px]">\n'
                    "  {loading ? <Skeleton /> : <Content />}\n"
                    "</div>"
                ),
            ),
        ),
    ),
    # ── Server components ──
    DiagnosticPattern(
        id="server-component-error",
        name="Server Component Errors",
        category=PatternCategory.SERVER_COMPONENT,
        severity=Severity.ERROR,
        symptoms=(
            "useState is not a function",
            "useEffect is not a function",
            "Cannot use hooks in Server Component",
            "Event handlers cannot be passed",
        ),
        keywords=("server", "component", "hook", "usestate", "useeffect", "client"),
        causes=(
            PatternCause(
                name="Hooks in Server Component",
                signature='useState/useEffect without "use client"',
                solution=(
                    "// First line of the file\n"
                    "'use client';\n"
                    "\n"
                    "// Or move the interactive part into a Client Component"
                ),
            ),
        ),
    ),
    # ── React 19 ──
    DiagnosticPattern(
        id="react-19-changes",
        name="React 19 Breaking Changes",
        category=PatternCategory.REACT_19,
        severity=Severity.WARNING,
        symptoms=("forwardRef is deprecated", "Unexpected behavior after upgrade"),
        keywords=("react 19", "forwardref", "upgrade", "deprecated"),
        causes=(
            PatternCause(
                name="forwardRef deprecated",
                signature="Using forwardRef pattern",
                example="const Button = forwardRef((props, ref) => ...);",
                solution=(
                    "// ref is a regular prop now\n"
                    "function Button({ ref, ...props }) {\n"
                    "  return <button ref={ref} {...props} />;\n"
                    "}"
                ),
            ),
        ),
    ),
    # ── Physics ──
    DiagnosticPattern(
        id="physics-financial-optimistic",
        name="Financial Action Using Optimistic Sync",
        category=PatternCategory.PHYSICS,
        severity=Severity.ERROR,
        symptoms=(
            "Financial action uses optimistic update",
            "Money operation without confirmation",
            "Transaction rolls back after user sees success",
        ),
        keywords=("claim", "deposit", "withdraw", "transfer", "swap", "optimistic"),
        causes=(
            PatternCause(
                name="Optimistic update on financial mutation",
                signature="onMutate used for financial operations",
                example=(
                    "useMutation({\n"
                    "  mutationFn: claimRewards,\n"
                    "  onMutate: async () => {\n"
                    "    queryClient.setQueryData(['balance'], newBalance)\n"
                    "  }\n"
                    "})"
                ),
                solution=(
                    "// Pessimistic sync: wait for the server before showing the result\n"
                    "useMutation({\n"
                    "  mutationFn: claimRewards,\n"
                    "  onSuccess: () => {\n"
                    "    queryClient.invalidateQueries(['balance'])\n"
                    "  }\n"
                    "})"
                ),
            ),
        ),
    ),
    DiagnosticPattern(
        id="physics-destructive-no-confirm",
        name="Destructive Action Without Confirmation",
        category=PatternCategory.PHYSICS,
        severity=Severity.ERROR,
        symptoms=(
            "Delete button with no confirmation",
            "Permanent action happens immediately",
            "No way to undo destructive operation",
        ),
        keywords=("delete", "remove", "destroy", "revoke", "terminate"),
        causes=(
            PatternCause(
                name="Missing confirmation for destructive action",
                signature="Destructive action without confirmation step",
                example="<button onClick={() => deleteItem()}>Delete</button>",
                solution=(
                    "const [showConfirm, setShowConfirm] = useState(false);\n"
                    "\n"
                    "return showConfirm ? (\n"
                    "  <ConfirmDialog\n"
                    '    message="Are you sure you want to delete?"\n'
                    "    onConfirm={() => deleteItem()}\n"
                    "    onCancel={() => setShowConfirm(false)}\n"
                    "  />\n"
                    ") : (\n"
                    "  <button onClick={() => setShowConfirm(true)}>Delete</button>\n"
                    ");"
                ),
            ),
        ),
    ),
)


def get_patterns() -> tuple[DiagnosticPattern, ...]:
    return PATTERNS


def get_patterns_by_category(category: PatternCategory) -> list[DiagnosticPattern]:
    return [p for p in PATTERNS if p.category == category]


def get_pattern_by_id(pattern_id: str) -> DiagnosticPattern | None:
    return next((p for p in PATTERNS if p.id == pattern_id), None)
