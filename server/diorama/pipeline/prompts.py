# ─────────────────────────────────────────────────────────────────────────────
# Prompt Texts — vision extraction + synthesis prompt assembly
# ─────────────────────────────────────────────────────────────────────────────
# Extraction prompts ask for counts and positions, not impressions: the
# synthesis model can only reproduce a recognizable house from structure it
# is told about explicitly.
#
# Spatial convention everywhere: left/right as seen FACING THE HOUSE from the
# street. Aerial: top of image = backyard, bottom = street.
# ─────────────────────────────────────────────────────────────────────────────

GENERIC_IDENTITY = "A suburban home with typical American architecture."

MOCK_DESCRIPTION = (
    "A grand two-story Mediterranean-style suburban home with a warm-toned stucco "
    "exterior and a distinct red clay terracotta tile roof. Features a large, manicured "
    "front lawn with a stone-paved curved walkway. Large windows with dark frames and a "
    "multi-car garage."
)


# ── v2 identity card ─────────────────────────────────────────────────────────

IDENTITY_EXTRACTION_PROMPT = """\
Extract this house's IDENTITY - the features that make it instantly recognizable.
Be PRECISE: give counts and positions, not impressions. Use left/right as seen \
FACING THE HOUSE from the street.

=== HOUSE IDENTITY CARD ===

**COLORS**:
- Walls: [exact shade + hex approximation]
- Roof: [exact shade + hex approximation]
- Trim/accents: [colors]
- Garage doors: [color]

**STRUCTURE**:
- Style: [name]
- Stories: [exact count, and which sections differ in height]
- Roof shape: [gable, hip, flat, mansard, combination - describe each section]
- Front windows: [count per story, and placement left/center/right]
- Front door: [position on facade, style]
- Garage: [number of doors, attached left/right/front-facing/detached]

**SITE LAYOUT**:
- Driveway: [path from street to garage - straight/curved/circular, which side]
- Trees and shrubs: [each with exact position, e.g. "tall palm at front-left corner"]
- Fencing/walls: [type and which sides]

**FROM AERIAL** (if aerial image provided):
- Pool: [yes/no; if yes, shape and EXACT position, e.g. "kidney pool, back-right"]
- Roof footprint: [L-shaped, U-shaped, rectangle, etc.]
- Notable backyard features: [description with positions]

**SIGNATURE FEATURES** (the 4-5 things that make THIS house unique):
1. [most distinctive]
2. [second]
3. [third]
4. [fourth]
5. [fifth if applicable]

**ONE-SENTENCE IDENTITY**:
[A single sentence capturing this house's essence that would make the owner say \
"that's MY house!"]"""


def build_reference_prompt(style_prompt: str, identity: str) -> str:
    """Synthesis prompt for styles that receive the street + aerial photos."""
    return f"""\
Create a {style_prompt}

I'm providing:
1. TWO REFERENCE PHOTOS of the actual house (street view and aerial)
2. The house's IDENTITY CARD with its distinctive features

Use the photos to see the EXACT details. Use the identity card to know what features \
MUST be captured.

=== HOUSE IDENTITY ===
{identity}
=== END IDENTITY ===

YOUR TASK:
- Study the reference photos carefully
- Create the house in the specified style
- The result must be UNMISTAKABLY this specific house
- All signature features from the identity card must be visible
- The owner should immediately recognize their home

Generate now."""


def build_text_only_prompt(style_prompt: str, identity: str) -> str:
    """Synthesis prompt for styles that work from the identity card alone."""
    return f"""\
{style_prompt}

=== HOUSE IDENTITY (follow this EXACTLY) ===
{identity}
=== END IDENTITY ===

Create this house based on the identity description above. Every architectural feature \
must match. The owner must immediately recognize their home.

Generate now."""


def build_generation_prompt(style_prompt: str, identity: str, *, use_reference: bool) -> str:
    if use_reference:
        return build_reference_prompt(style_prompt, identity)
    return build_text_only_prompt(style_prompt, identity)


# ── Legacy dual analysis (/generate) ─────────────────────────────────────────

STREET_VIEW_ANALYSIS_PROMPT = """\
You are a real estate architecture expert analyzing a STREET VIEW image of a residential \
property. Describe ONLY what you can see from this front-facing perspective.

Use spatial directions as if FACING THE HOUSE FROM THE STREET (left/right means viewer's \
left/right).

ARCHITECTURAL STYLE & FACADE:
- Style name (Mediterranean, Craftsman, Colonial, Ranch, Contemporary, Spanish Revival, etc.)
- Number of stories and height variations between sections
- Exterior wall color (be EXTREMELY SPECIFIC: warm beige, cream, ivory, taupe, terracotta, \
sage green - NEVER generic "white" or "tan")
- Trim color, accent colors, any contrasting elements

ROOF (visible portions):
- Shape (gable, hip, flat, combination, mansard)
- Material and color (terracotta clay tile, concrete tile, gray asphalt shingle, wood shake, etc.)
- Visible dormers, eaves, exposed rafters, decorative brackets

WINDOWS:
- Style (arched top, rectangular, bay window, picture window)
- Grid pattern (divided lite, single pane, colonial grids)
- Frame color (white, black, bronze, natural wood)
- Approximate count and arrangement on facade
- Any shutters (color and style)

FRONT DOOR & ENTRY:
- Door style and color
- Entry features (covered porch, portico, columns, steps)
- Position on facade (centered, offset left, offset right)

GARAGE:
- Position relative to house (attached left, attached right, front-facing, set back)
- Number of garage doors
- Door style and color
- Windows on garage doors (yes/no, style if present)

DRIVEWAY & WALKWAYS:
- Driveway approach direction (from left, from right, from center)
- Material and color (light gray concrete, tan pavers, brick, stamped concrete)
- Walkway to front door (material, path)
- Any entry pillars, columns, or gates (describe position)

FRONT YARD LANDSCAPING:
- Lawn condition and coverage
- Trees with EXACT positions (e.g., "tall palm tree at front-left corner", "mature oak \
front-right of driveway")
- Hedges and shrubs with positions (e.g., "low boxwood hedge along foundation")
- Flower beds, decorative rocks, or garden features
- Fencing visible (type, color, position: "white vinyl fence along left side")

OUTPUT: Write 4-5 detailed sentences describing the front facade, starting with \
architectural style, then systematically covering each visible element with precise \
spatial positions."""

AERIAL_VIEW_ANALYSIS_PROMPT = """\
You are a real estate architecture expert analyzing an AERIAL/SATELLITE image of a \
residential property. Describe ONLY what you can see from this bird's-eye perspective.

Use spatial directions as if FACING THE HOUSE FROM THE STREET (top of image = backyard, \
bottom = street, left/right = viewer's left/right when facing house).

ROOF (from above):
- Complete roof shape and complexity (L-shaped, U-shaped, simple rectangle, etc.)
- Roof color from above
- Any skylights, solar panels, chimneys (with positions)
- Multiple roof sections or height levels

LOT SHAPE & DIMENSIONS:
- Overall lot shape (rectangular, corner lot, pie-shaped, irregular)
- Approximate lot proportions (wide/narrow, deep/shallow)
- House position on lot (centered, offset toward front/back/left/right)

DRIVEWAY LAYOUT:
- Full driveway path from street to garage
- Driveway shape (straight, curved, circular, Y-shaped)
- Parking areas or widened sections
- Position relative to house (along left side, along right side, center approach)

BACKYARD FEATURES:
- Pool: EXACT shape (rectangular, kidney, freeform, L-shaped) and EXACT position \
(back-center, back-left corner, back-right corner, along left side)
- Pool deck/patio material and extent
- Covered patio or pergola structures (position and size)
- Outdoor kitchen, fire pit, or built-in features

BACKYARD LANDSCAPING:
- Lawn areas vs. hardscape ratio
- Trees with EXACT positions (e.g., "large tree back-left corner", "row of trees along \
back fence")
- Garden beds or planting areas
- Any outbuildings (shed, gazebo, pool house) with positions

FENCING & BOUNDARIES:
- Fence type visible (wood, block wall, wrought iron, vinyl)
- Which sides have fencing
- Any gates or openings

OUTPUT: Write 4-5 detailed sentences describing the property from above, focusing on lot \
layout, backyard features, pool position, and landscaping with precise spatial positions."""

STREET_ONLY_ANALYSIS_PROMPT = """\
You are a real estate architecture expert. Analyze this Street View image with EXTREME \
PRECISION for an AI image generator. Describe from the perspective of someone FACING THE \
HOUSE from the street.

Describe EXACTLY with SPATIAL POSITIONS:
- Exterior wall color (be specific: beige, tan, cream - NOT generic "white" unless truly white)
- Architectural style (Craftsman, Spanish Colonial, Mediterranean, Ranch, etc.)
- Roof color and style, exposed rafters/eaves if present
- Garage: door count, window style (arched, rectangular), position (left/right/center)
- Fencing with location (e.g., "white fence along left side", "block wall on right")
- Driveway position (e.g., "driveway on the left leading to garage")
- Pillars, columns, porches with positions
- Trees with positions (e.g., "large palm tree front right", "row of hedges along left")
- Any visible pool or backyard features with position (e.g., "pool visible in back left")

Output ONE detailed paragraph (3-4 sentences). USE SPATIAL LANGUAGE: left/right (when \
facing house from street), front/back. ACCURACY AND POSITIONING ARE CRITICAL - the AI must \
recreate THIS EXACT house with correct element placement."""


def build_combine_prompt(street_description: str, aerial_description: str) -> str:
    """Merge the two single-view analyses into one description."""
    return f"""\
You are creating a SINGLE comprehensive property description for an AI image generator by \
combining two expert analyses.

STREET VIEW ANALYSIS (front facade details):
{street_description}

AERIAL VIEW ANALYSIS (lot layout and backyard):
{aerial_description}

TASK: Merge these into ONE cohesive, detailed paragraph (6-8 sentences) that includes ALL \
specific details from BOTH analyses:
- Start with architectural style and facade details from street view
- Include exact colors, materials, window styles, garage position
- Incorporate lot shape, driveway path, and landscaping positions
- Include pool shape AND exact position from aerial view
- Include tree positions from BOTH views
- Use consistent spatial language (left/right when facing house from street, front/back)

The output must be detailed enough for an AI to recreate THIS EXACT property with precise \
element placement. Do not omit any specific details from either analysis."""


def build_legacy_prompt(style_prompt: str, description: str) -> str:
    return f"{style_prompt}\n\nThe property: {description}"


# ── /vision/analyze ──────────────────────────────────────────────────────────

SEMANTIC_DESCRIPTION_PROMPT = """\
Analyze this Street View image of a residential property and generate a detailed semantic \
description suitable for AI image generation.

Focus on:
1. Architectural style (e.g., Mediterranean, Colonial, Modern, Victorian, Ranch)
2. Exterior materials and colors (stucco, brick, siding, etc.)
3. Roof style and materials (tile, shingle, flat, etc.)
4. Landscaping features (lawn, trees, hedges, flowers)
5. Driveway and walkway materials
6. Notable features (pool, garage, porch, balcony)
7. Window and door styles
8. Overall scale and proportions

Output ONLY a single paragraph (2-4 sentences) describing the property. Be specific about \
materials, colors, and distinctive features. Do not include any preamble or explanation."""
