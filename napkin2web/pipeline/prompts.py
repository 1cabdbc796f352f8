"""
Prompt templates for sketch classification, analysis, conversion and editing.
"""

from napkin2web.models import Framework


SKETCH_LABEL = "UI_SKETCH"
NOT_SKETCH_LABEL = "NOT_UI_SKETCH"

CLASSIFICATION_PROMPT = (
    "You are an image classifier. Your task is to decide if this image is a hand-drawn UI "
    "or wireframe sketch of a software interface. A valid UI sketch contains layouts, boxes, "
    "buttons, input fields, text labels, screens, navigation, or app layouts. It should look "
    "like a rough website or app design drawn on paper, whiteboard, or tablet. Respond ONLY "
    f"with one of these two values: {SKETCH_LABEL} or {NOT_SKETCH_LABEL}."
)

ANALYZE_PROMPT = (
    "Analyze this UI sketch in detail. List all sections, components, colors, spacing, and "
    "layout logic. Provide a comprehensive UI blueprint description in plain text."
)


STYLE_GUIDE = """
You are a world-class award-winning frontend developer and UI/UX designer. Your task is to convert a UI description or a sketch into a stunning, production-ready implementation.

Aesthetic Guidelines (The "Super-Human Utility" Theme):
- Colors: Deep midnight blues, sleek blacks, and vibrant accent colors (e.g., Electric Purple #8B5CF6, Cyan #06B6D4). Avoid flat white backgrounds.
- Backgrounds: Use subtle mesh gradients or dark radial backgrounds.
- Components: Use glassmorphism (backdrop-blur, subtle borders, thin white shadows).
- Typography: Use bold, clear headings and high-quality sans-serif fonts (like Inter).
- Interactive Elements: Add hover animations to buttons and inputs using Tailwind transition/transform classes.
- Spacing: Generous padding and logical grouping of elements.
"""

STATIC_CONTRACT = """
Convert this UI into clean, single-file HTML and Tailwind CSS.
Requirements:
- Use semantic HTML.
- Use Tailwind CSS via CDN.
- Use Lucide Icons (via CDN).
- Use Google Fonts (Inter).
- Return ONLY the complete HTML code starting with <!DOCTYPE html>.
"""

REACT_CONTRACT = """
Convert this UI into a modern React functional component using Tailwind CSS.
Requirements:
- Use Lucide React for icons.
- Use Tailwind CSS for all styling.
- Assume Tailwind is configured.
- Include all necessary imports at the top.
- Export the component as the default export.
- Return ONLY the React component code. Do not include markdown blocks.
- The component should be a single file named 'App.tsx' or similar.
"""

NEXTJS_CONTRACT = """
Convert this UI into a Next.js 14+ Page (App Router) using Tailwind CSS.
Requirements:
- Use 'use client' if interactivity is needed.
- Use Lucide React for icons.
- Use Tailwind CSS for styling.
- Follow Next.js best practices.
- No backend or API routes.
- Export the page as the default export.
- Return ONLY the page file code (page.tsx). Do not include markdown blocks.
"""

FRAMEWORK_CONTRACTS = {
    Framework.STATIC: STATIC_CONTRACT,
    Framework.REACT: REACT_CONTRACT,
    Framework.NEXTJS: NEXTJS_CONTRACT,
}


EDITOR_DIRECTIVES = """
You are an expert full-stack frontend engineer. You are part of the "Universal AI Editing Engine" for Napkin2Web.
Your mission is to modify the existing UI code based on natural language instructions.

Core Directives:
1. Universal Capability: You can Edit, Delete, Move, Restyle, Resize, Re-layout, Recolor, or Rebuild any part of the UI.
2. Context Awareness: Respect the current framework (Static, React, or Next.js) and maintain its styling (Tailwind CSS).
3. Stateful Persistence: Build on the previous code. Do not reset the layout unless explicitly asked to "rebuild" or "start over".
4. Precision Styling: Use Tailwind CSS for all modifications. If asked for animations, use Tailwind's transition classes or popular libraries if appropriate for the framework.
5. Content Quality: If asked to "add a feature" or "make it look like X", implement high-quality, professional UI components that match the "Super-Human Utility" aesthetic.

Instructions:
- Return ONLY the updated, complete code.
- No markdown code blocks (e.g., no ```html or ```tsx).
- No explanations or chatty text.
- Ensure the code remains functional and responsive.
- If deleting an element, ensure its parent layout remains stable.
"""

EDIT_TEMPLATE = """
Current Framework: {framework}
Current Code:
{current_code}

User Instruction:
{instruction}

{directives}
"""

# Appended to the UI description when a non-static edit refreshes the preview.
PREVIEW_UPDATE_NOTE = "\n\nLatest Update: {instruction}"


def build_conversion_prompt(framework: Framework, ui_description: str = None) -> str:
    """
    Build the text part of a convert request.

    Args:
        framework: Target output framework.
        ui_description: Optional UI blueprint from the analyze step.

    Returns:
        Prompt text.
    """
    system_prompt = STYLE_GUIDE + FRAMEWORK_CONTRACTS[framework]
    if ui_description:
        return f"Use this UI Blueprint to generate code:\n{ui_description}\n\n{system_prompt}"
    return f"Generate code from this sketch:\n\n{system_prompt}"


def build_edit_prompt(framework: Framework, current_code: str, instruction: str) -> str:
    """Build the full prompt of an edit request."""
    return EDIT_TEMPLATE.format(
        framework=framework.value,
        current_code=current_code,
        instruction=instruction,
        directives=EDITOR_DIRECTIVES,
    )


def describe_edit(ui_description: str, instruction: str) -> str:
    """UI description augmented with a note about the latest edit."""
    return ui_description + PREVIEW_UPDATE_NOTE.format(instruction=instruction)
