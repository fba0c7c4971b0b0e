"""
Reference Palette Data.

Solid-coated colour codes used for manufacturing specs. Order matters:
nearest-match ties resolve to the entry that appears first here.

Each row is (code, name, hex).
"""

from __future__ import annotations

PALETTE_ROWS: tuple[tuple[str, str, str], ...] = (
    ("100 C", "Yellow", "#F6EB61"),
    ("101 C", "Bright Yellow", "#F7EA48"),
    ("102 C", "Lemon Yellow", "#FCE300"),
    ("103 C", "Old Gold", "#C5A900"),
    ("104 C", "Golden Brown", "#AF9800"),
    ("105 C", "Olive", "#897A27"),
    ("109 C", "Golden Yellow", "#FFD100"),
    ("116 C", "Mustard Yellow", "#FFCD00"),
    ("123 C", "Sunglow", "#FFC72C"),
    ("130 C", "Tangerine Yellow", "#F2A900"),
    ("137 C", "Orange Peel", "#FFA300"),
    ("144 C", "Pumpkin", "#ED8B00"),
    ("151 C", "Orange", "#FF8200"),
    ("158 C", "Tiger Orange", "#E57200"),
    ("165 C", "Bright Orange", "#FF6720"),
    ("172 C", "Red Orange", "#FA4616"),
    ("179 C", "Vermillion Red", "#E03C31"),
    ("185 C", "Red", "#E4002B"),
    ("186 C", "True Red", "#C8102E"),
    ("192 C", "Rose", "#E84E6C"),
    ("199 C", "Cardinal Red", "#D50032"),
    ("206 C", "Magenta", "#D62598"),
    ("213 C", "Pink", "#E21776"),
    ("220 C", "Burgundy", "#A50050"),
    ("227 C", "Raspberry", "#AD1457"),
    ("234 C", "Deep Rose", "#AA0061"),
    ("241 C", "Purple", "#AD1AAC"),
    ("248 C", "Violet", "#782F89"),
    ("255 C", "Deep Purple", "#692F7F"),
    ("262 C", "Royal Purple", "#5C2D91"),
    ("269 C", "Plum", "#6B2D5B"),
    ("276 C", "Midnight", "#2E294E"),
    ("283 C", "Sky Blue", "#92C1E9"),
    ("290 C", "Powder Blue", "#C4D8E2"),
    ("297 C", "Cyan", "#00A3E0"),
    ("300 C", "Royal Blue", "#0050A0"),
    ("306 C", "Turquoise", "#00B5E2"),
    ("313 C", "Teal", "#0093B2"),
    ("320 C", "Peacock", "#009CA6"),
    ("327 C", "Deep Teal", "#008C82"),
    ("334 C", "Emerald", "#009775"),
    ("341 C", "Green", "#007A53"),
    ("348 C", "Kelly Green", "#00843D"),
    ("355 C", "Bright Green", "#009639"),
    ("362 C", "Leaf Green", "#4BA82E"),
    ("369 C", "Lime Green", "#64A70B"),
    ("376 C", "Yellow Green", "#84BD00"),
    ("383 C", "Olive Green", "#A6A400"),
    ("390 C", "Chartreuse", "#B5BD00"),
    ("397 C", "Lemon Lime", "#C4C600"),
    ("401 C", "Warm Gray", "#A49B8F"),
    ("408 C", "Medium Gray", "#857874"),
    ("415 C", "Cool Gray", "#6E7377"),
    ("420 C", "Silver", "#C7C8C9"),
    ("421 C", "Light Gray", "#B1B3B6"),
    ("422 C", "Gray", "#9D9FA2"),
    ("423 C", "Steel Gray", "#898C8E"),
    ("424 C", "Dark Gray", "#707372"),
    ("425 C", "Charcoal", "#545454"),
    ("426 C", "Black", "#25282A"),
    ("427 C", "Pearl Gray", "#D0D3D4"),
    ("428 C", "Platinum", "#C1C6C8"),
    ("429 C", "Pewter", "#A7AAAD"),
    ("430 C", "Slate", "#858F93"),
    ("431 C", "Graphite", "#5A6269"),
    ("432 C", "Gunmetal", "#333E48"),
    ("433 C", "Onyx", "#1E252B"),
    ("468 C", "Champagne", "#DDCBA4"),
    ("475 C", "Peach", "#F1B091"),
    ("482 C", "Terra Cotta", "#C17E61"),
    ("483 C", "Rust", "#8A391B"),
    ("4625 C", "Chocolate Brown", "#4F2C1D"),
    ("4695 C", "Coffee", "#3A2421"),
    ("470 C", "Copper", "#99623B"),
    ("471 C", "Brown", "#6D4F47"),
    ("476 C", "Dark Brown", "#503C3C"),
    ("478 C", "Espresso", "#3C2415"),
    ("485 C", "Scarlet", "#DA291C"),
    ("White", "White", "#FFFFFF"),
    ("Black C", "Process Black", "#2D2926"),
)
