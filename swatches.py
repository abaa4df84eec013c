"""
Render ladders as a PNG swatch sheet: one row per theme, drawn on that
theme's background, each tile labelled in its solved on-color.
"""

from PIL import Image, ImageDraw

from audit import DEFAULT_SURFACES, Surfaces
from oklch import hex_to_rgb


def visualize_ladders(ladders: dict, output_path: str,
                      surfaces: Surfaces = DEFAULT_SURFACES) -> None:
    """
    Draw each theme's ladder as a row of swatches.

    Args:
        ladders: theme -> tuple of LadderStep, as built by analyze.build_ladders
        output_path: Path to save the PNG
        surfaces: Supplies the row background for each theme
    """
    swatch_size = 80
    padding = 10
    text_height = 20
    label_width = 60

    max_steps = max(len(steps) for steps in ladders.values())
    img_width = label_width + max_steps * (swatch_size + padding) + padding
    img_height = len(ladders) * (swatch_size + text_height + 2 * padding)

    img = Image.new('RGB', (img_width, img_height), (240, 240, 240))
    draw = ImageDraw.Draw(img)

    for row, (theme, steps) in enumerate(ladders.items()):
        y0 = row * (swatch_size + text_height + 2 * padding)
        tokens = surfaces.for_theme(theme)
        bg = hex_to_rgb(tokens.bg)
        label_fill = hex_to_rgb(tokens.text) if tokens.text else (128, 128, 128)

        # Theme band
        draw.rectangle([0, y0, img_width, y0 + swatch_size + text_height + 2 * padding], fill=bg)
        draw.text((padding, y0 + padding + swatch_size // 2 - 5), theme, fill=label_fill)

        for col, step in enumerate(steps):
            x = label_width + col * (swatch_size + padding)
            y = y0 + padding
            draw.rectangle([x, y, x + swatch_size, y + swatch_size], fill=hex_to_rgb(step.hex))

            # Legibility sample in the on-color
            on = hex_to_rgb(step.on)
            draw.text((x + swatch_size // 2 - 6, y + swatch_size // 2 - 6), "Aa", fill=on)
            draw.text((x + 4, y + swatch_size - 14), step.hex, fill=on)

            # Level label under the swatch
            bbox = draw.textbbox((0, 0), step.label)
            text_x = x + (swatch_size - (bbox[2] - bbox[0])) // 2
            draw.text((text_x, y + swatch_size + 4), step.label, fill=label_fill)

    img.save(output_path)
    print(f"Saved visualization to {output_path}")
