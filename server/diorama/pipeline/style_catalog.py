# ─────────────────────────────────────────────────────────────────────────────
# Style Catalog — server-held allowlist of generation styles
# ─────────────────────────────────────────────────────────────────────────────
# Data, not logic. Validated by StyleRegistry at startup.
#
# use_reference=True  → street + aerial photos go to the synthesis model
# use_reference=False → identity text only, for styles that must be free to
#                       change colors and composition
#
# Templates may contain {location}; see StyleDefinition.render_prompt().
# ─────────────────────────────────────────────────────────────────────────────

from typing import Any

STYLE_TABLE: list[dict[str, Any]] = [
    # ── Core styles ──────────────────────────────────────────────────────────
    {
        "id": "diorama",
        "display_name": "Miniature Diorama",
        "use_reference": True,
        "prompt_template": (
            "45-degree isometric miniature architectural diorama model. Studio photography, "
            "warm lighting, clean background. Show the house from an isometric angle revealing "
            "front, side, and roof. Make it look like a high-end architectural scale model."
        ),
    },
    {
        "id": "simcity",
        "display_name": "Retro SimCity",
        "use_reference": True,
        "prompt_template": (
            "90s SimCity-style 2.5D isometric pixel art sprite. Clean aliased edges, vibrant "
            "16-bit colors, gray-blue solid background. Pixel-perfect retro game aesthetic."
        ),
    },
    {
        "id": "lego",
        "display_name": "LEGO Architecture",
        "use_reference": True,
        "prompt_template": (
            "LEGO Architecture brick-built model. Chunky LEGO bricks with visible studs, smooth "
            "ABS plastic sheen, minifigure-scale. White gradient studio background, product "
            "photography style."
        ),
    },
    {
        "id": "bauhaus",
        "display_name": "Bauhaus Poster",
        "use_reference": False,
        "prompt_template": """\
TRANSFORM this house into a Bauhaus geometric poster illustration.

MANDATORY BAUHAUS STYLE:
- Reduce the house to PURE GEOMETRIC SHAPES: circles, squares, rectangles, triangles
- FLAT colors only - NO gradients, NO shading, NO 3D effects
- Limited palette: red, blue, yellow, black, white, and cream/tan
- Bold black outlines separating color blocks
- Asymmetric but balanced composition

IMPORTANT:
- DO NOT include any text, words, labels, or typography
- DO NOT include "house identity card" or any descriptions
- ONLY create the geometric illustration of the house
- Think: Kandinsky, Mondrian abstract art style

Create ONLY the geometric artwork - no text whatsoever.""",
    },
    {
        "id": "figurine",
        "display_name": "Plastic Figurine",
        "use_reference": True,
        "prompt_template": (
            "Miniature isometric plastic figurine, like a detailed board game piece or "
            "architectural model. Slightly stylized proportions (a bit chunky/cute). Smooth "
            "plastic finish, white background, product photography."
        ),
    },
    # ── Painterly / illustrated styles ───────────────────────────────────────
    {
        "id": "wesanderson",
        "display_name": "Wes Anderson",
        "use_reference": False,
        "prompt_template": (
            "Photorealistic Wes Anderson film still. Shot on 35mm film, architecturally sharp "
            "and detailed. The house has been repainted and art-directed for the film: walls "
            "are now soft peachy-pink, the roof is dusty coral/salmon, trim is cream white. The "
            "sky is powder blue, grass is muted sage green. Perfect bilateral symmetry, house "
            "dead-center. Soft diffused golden hour lighting. 8K cinematic quality. The Grand "
            "Budapest Hotel aesthetic."
        ),
    },
    {
        "id": "animalcrossing",
        "display_name": "Animal Crossing",
        "use_reference": True,
        "prompt_template": """\
Animal Crossing style illustration - a soft, hand-drawn storybook scene. NOT a 3D game screenshot.

Art style requirements:
- Soft, gentle LINE ART with pastel colored outlines (not black)
- Hand-illustrated, watercolor-like quality
- Dreamy, whimsical storybook aesthetic
- Soft pastel color palette with muted tones
- Gentle gradients and soft shading

Scene composition:
- The house as the focal point in middle-ground
- 2-3 CUTE ANTHROPOMORPHIC ANIMAL VILLAGERS in the foreground (foxes, deer, cats, etc. wearing clothes)
- Lush, illustrated trees with soft, fluffy foliage surrounding the scene
- A gentle stream, pond, or river in the foreground
- Stepping stone path leading to the house
- Soft clouds and warm sunny sky
- Butterflies, birds, or falling leaves for atmosphere

The overall feeling should be cozy, peaceful, and magical - like a scene from a beloved \
children's book or Animal Crossing promotional art.""",
    },
    {
        "id": "ghibli",
        "display_name": "Studio Ghibli",
        "use_reference": True,
        "prompt_template": (
            "Studio Ghibli anime background painting. Reimagine this house in Miyazaki's world - "
            "warm afternoon sun, hand-painted textures, lush vegetation, puffy clouds. Show it "
            "from a slight angle like an establishing shot. Include all the signature features."
        ),
    },
    {
        "id": "bobross",
        "display_name": "Bob Ross",
        "use_reference": True,
        "prompt_template": """\
Bob Ross style oil painting - a naturalistic landscape scene with the house nestled organically in nature.

Painting style:
- Impressionistic oil painting with VISIBLE BRUSH STROKES
- Wet-on-wet technique with soft, blended edges
- Canvas texture visible through the paint
- Rich, warm color palette

Scene composition (IMPORTANT - naturalistic, not staged):
- The house viewed from an angle, partially obscured by trees
- ABUNDANT AUTUMN FOLIAGE - rich oranges, deep reds, golden yellows, rusty browns
- Deciduous trees with detailed fall leaves surrounding and framing the house
- A winding stream or creek flowing through the foreground
- Wildflowers, bushes, and natural ground cover
- Soft afternoon sunlight filtering through the trees
- The house should feel like it BELONGS in this natural setting

Avoid:
- Symmetrical compositions
- The house being too prominent or centered
- Sparse, empty areas
- Overly bright or saturated colors

The painting should feel like a peaceful autumn day - the kind of scene Bob would paint \
while talking about "happy little trees" and making you feel relaxed.""",
    },
    {
        "id": "kinkade",
        "display_name": "Thomas Kinkade",
        "use_reference": True,
        "prompt_template": (
            'Thomas Kinkade "Painter of Light" style painting. Magical golden hour lighting, warm '
            "glowing windows emanating cozy light, lush flowering gardens, romantic idealized "
            "atmosphere, soft ethereal glow throughout. Nostalgic, heartwarming, "
            "Christmas-card beautiful."
        ),
    },
    {
        "id": "ukiyoe",
        "display_name": "Ukiyo-e Woodblock",
        "use_reference": False,
        "prompt_template": """\
Traditional Japanese ukiyo-e woodblock print in the style of Hokusai and Hiroshige. \
Create a COMPLETE COMPOSITION, not just the house.

REQUIRED elements:
- The house as the central subject but integrated into a larger scene
- Mount Fuji or mountains visible in the distant background
- Traditional Japanese figures in period clothing (merchants, travelers, or townspeople) \
in the foreground or middle ground
- Japanese calligraphy/kanji text block on the left or right margin (artist signature style)
- Decorative cartouche with title text
- Stylized waves, clouds, or wind patterns
- Cherry blossoms or pine trees framing the scene

Visual style requirements:
- Flat color areas with BOLD BLACK OUTLINES (no gradients)
- Limited color palette: indigo blue, rust red, ochre yellow, sage green, cream
- Visible wood grain texture throughout
- Bokashi gradient technique on sky
- Multiple visual planes creating depth
- Edo period (1603-1868) aesthetic

This should look like it could hang in a museum next to "The Great Wave.\"""",
    },
    {
        "id": "travelposter",
        "display_name": "Vintage Travel Poster",
        "use_reference": False,
        "prompt_template": (
            "Vintage 1950s travel poster illustration. Bold flat colors, simplified geometric "
            "shapes, art deco influences, optimistic mid-century modern aesthetic, "
            'screen-printed texture, "Visit {location}" tourism poster style. Warm sunset '
            "palette with teal accents."
        ),
    },
    {
        "id": "richardscarry",
        "display_name": "Richard Scarry",
        "use_reference": True,
        "prompt_template": (
            "Richard Scarry Busytown children's book illustration. Charming hand-drawn style, "
            "warm cheerful colors, cross-section cutaway showing interior rooms, tiny "
            "anthropomorphic animal residents going about their day, whimsical details "
            "everywhere, nostalgic 1970s children's book aesthetic."
        ),
    },
    {
        "id": "lofi",
        "display_name": "Lo-fi Anime",
        "use_reference": True,
        "prompt_template": (
            "Lo-fi hip hop anime aesthetic illustration. Warm cozy evening lighting, soft purple "
            "and orange sunset tones, gentle rain or cherry blossoms falling, peaceful "
            "melancholic mood, anime background art style, study girl YouTube channel "
            "aesthetic. Relaxing, nostalgic, slightly dreamy."
        ),
    },
    {
        "id": "cottagecore",
        "display_name": "Cottagecore",
        "use_reference": True,
        "prompt_template": (
            "Dreamy cottagecore fairy tale illustration. Romanticized overgrown garden, climbing "
            "roses and wisteria, soft dappled sunlight through trees, vintage pastoral "
            "aesthetic, slightly ethereal and magical atmosphere, wildflower meadow, butterflies "
            "and songbirds. Pinterest-perfect rural fantasy."
        ),
    },
    {
        "id": "hologram",
        "display_name": "Hologram",
        "use_reference": True,
        "prompt_template": (
            "A futuristic holographic interface displaying this house as a 3D wireframe model. "
            "Neon cyan and magenta energy beams outlining the architectural form. Floating data "
            "symbols and measurement annotations, transparent glowing layers, luminous edges. "
            "Set in a dark high-tech command hub with curved display screens. Sci-fi movie "
            "aesthetic, Blade Runner vibes."
        ),
    },
    # ── Retro / playful styles ───────────────────────────────────────────────
    {
        "id": "eightbit",
        "display_name": "8-Bit NES",
        "use_reference": True,
        "prompt_template": """\
TRANSFORM this house into retro 8-bit pixel art. DO NOT create a realistic photo.

MANDATORY STYLE - This MUST look like a Nintendo NES video game from 1985:
- LARGE CHUNKY PIXELS (like Minecraft blocks but 2D)
- ONLY 16-25 colors total, no smooth gradients
- BLACK pixel outlines around everything
- Flat colors with dithering patterns for shading
- Simplified blocky shapes - squares and rectangles only

OUTPUT REQUIREMENTS:
- The house should be recognizable but heavily pixelated
- Sky should be a solid color or simple pixel gradient
- Ground/grass as simple green pixel rows
- NO photorealism - this must look like a retro video game sprite
- Think: buildings from Super Mario Bros, Zelda, or Mega Man

Create an 8-bit pixel art sprite of this house, NOT a photograph.""",
    },
    {
        "id": "coloringsheet",
        "display_name": "Coloring Sheet",
        "use_reference": True,
        "prompt_template": """\
Create a coloring book page of this house for children to color in.

MANDATORY STYLE:
- BLACK OUTLINES ONLY on pure white background
- NO filled colors, NO shading, NO gray tones
- Clean, clear line art suitable for a child to color
- Lines should be thick enough for small hands (2-3px weight)
- Simple, friendly style - not too detailed or complex

COMPOSITION:
- The house as the main subject, clearly outlined
- Include some simple landscaping elements (trees, bushes, flowers as outlines)
- Add a simple sun, clouds, or birds as outline shapes
- Maybe a path leading to the house
- Keep shapes simple and easy to color within

This should look like a page from a children's coloring book - pure black line art on \
white, ready to be colored in with crayons or markers.""",
    },
    {
        "id": "crayon",
        "display_name": "Crayon Drawing",
        "use_reference": True,
        "prompt_template": """\
A child's crayon drawing of this house, like a middle schooler's art project.

Style requirements:
- Drawn with WAX CRAYONS on white construction paper
- Visible waxy crayon texture with uneven color fill
- Wobbly, imperfect hand-drawn lines (not straight)
- Colors slightly outside the lines
- Heavy crayon pressure in some areas, light in others
- Layered crayon strokes visible

Childlike characteristics:
- Simplified shapes and proportions
- Bright, cheerful primary colors (red, blue, yellow, green, orange)
- Sun with rays in the corner
- Fluffy cloud shapes
- Green grass drawn as a strip at the bottom
- Maybe a stick figure family or pet in the yard
- Flowers as simple circles with stems
- Birds as simple "M" shapes in the sky

The drawing should feel authentic - like something a 10-12 year old would proudly bring \
home from art class. Charming imperfections, not polished.""",
    },
    {
        "id": "openarmy",
        "display_name": "Open Army",
        "use_reference": True,
        "prompt_template": """\
1980s military action figure playset style, like a GI Joe or Army Men headquarters.

Style requirements:
- Molded plastic toy aesthetic with painted details
- Military color palette: tan, olive drab, gray, brown camo patterns
- The house transformed into a covert ops command center or military base
- Detailed accessories: sandbags, camo netting, radar dish, antenna arrays
- Isometric view showing the full base layout

Toy characteristics:
- Visible plastic texture and seams like injection-molded toys
- Hand-painted details with slight imperfections
- Product photography style on clean white background
- Like a vintage 1980s Hasbro toy catalog photo
- Could include a small soldier figure for scale

Make it look like a collectible military playset that a kid in the 80s would have wanted \
for Christmas.""",
    },
]
