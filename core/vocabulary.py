"""Default word list used on first start and after a reset."""

DEFAULT_WORDS = [
    {
        'id': 1,
        'word': 'Ambition',
        'definition': 'A strong desire to do or to achieve something.',
        'sentence': 'Her ambition is to become a pilot.',
    },
    {
        'id': 2,
        'word': 'Resilient',
        'definition': 'Able to withstand or recover quickly from difficult conditions.',
        'sentence': 'Plants are often resilient to changes in weather.',
    },
    {
        'id': 3,
        'word': 'Ephemeral',
        'definition': 'Lasting for a very short time.',
        'sentence': 'Fashions are ephemeral, changing with every season.',
    },
]
