"""Built-in question bank used by the offline question provider.

Entries use the same wire shape the generation model returns, so they go
through the same validation as generated questions.
"""

from typing import Any, Dict, List, Tuple

from iqtest.models.question import Question

BUILTIN_QUESTIONS: List[Dict[str, Any]] = [
    # Logical reasoning
    {
        "id": 1,
        "type": "logical",
        "question": "If all roses are flowers and some flowers are red, which statement must be true?",
        "options": ["All roses are red", "Some roses might be red", "No roses are red", "All red things are roses"],
        "correctAnswer": 1,
        "explanation": "Since some flowers are red and all roses are flowers, it's possible that some roses could be red, but we cannot determine this with certainty.",
        "difficulty": "medium",
    },
    {
        "id": 2,
        "type": "logical",
        "question": "All birds can fly. Penguins are birds. Therefore:",
        "options": ["Penguins can fly", "The first statement is false", "Penguins are not birds", "Flying is not necessary for birds"],
        "correctAnswer": 1,
        "explanation": "This is a classic example of a false premise. Since we know penguins cannot fly, the first statement 'All birds can fly' must be false.",
        "difficulty": "hard",
    },
    {
        "id": 3,
        "type": "logical",
        "question": "If A is taller than B, and B is taller than C, then:",
        "options": ["A is shorter than C", "A is taller than C", "A and C are the same height", "Cannot be determined"],
        "correctAnswer": 1,
        "explanation": "This is a transitive relationship. If A > B and B > C, then A > C.",
        "difficulty": "easy",
    },
    {
        "id": 4,
        "type": "logical",
        "question": "Some cats are animals. All animals are living things. Therefore:",
        "options": ["Some cats are living things", "All cats are living things", "No cats are living things", "Some living things are cats"],
        "correctAnswer": 0,
        "explanation": "Since some cats are animals and all animals are living things, it follows that some cats are living things.",
        "difficulty": "medium",
    },
    {
        "id": 5,
        "type": "logical",
        "question": "If it rains, then the ground gets wet. The ground is wet. Therefore:",
        "options": ["It rained", "It might have rained", "It didn't rain", "The ground is always wet"],
        "correctAnswer": 1,
        "explanation": "This is the fallacy of affirming the consequent. The ground could be wet for other reasons besides rain.",
        "difficulty": "hard",
    },
    # Numerical reasoning
    {
        "id": 6,
        "type": "numerical",
        "question": "What comes next in the sequence: 2, 6, 18, 54, ?",
        "options": ["108", "162", "216", "324"],
        "correctAnswer": 1,
        "explanation": "Each number is multiplied by 3: 2×3=6, 6×3=18, 18×3=54, 54×3=162",
        "difficulty": "medium",
    },
    {
        "id": 7,
        "type": "numerical",
        "question": "If 5x + 3 = 23, what is x?",
        "options": ["3", "4", "5", "6"],
        "correctAnswer": 1,
        "explanation": "5x + 3 = 23, so 5x = 20, therefore x = 4",
        "difficulty": "easy",
    },
    {
        "id": 8,
        "type": "numerical",
        "question": "What is the next number in the sequence: 1, 4, 9, 16, 25, ?",
        "options": ["30", "36", "42", "49"],
        "correctAnswer": 1,
        "explanation": "These are perfect squares: 1², 2², 3², 4², 5², 6² = 36",
        "difficulty": "easy",
    },
    {
        "id": 9,
        "type": "numerical",
        "question": "A car travels 180 miles in 3 hours. What is its average speed?",
        "options": ["50 mph", "55 mph", "60 mph", "65 mph"],
        "correctAnswer": 2,
        "explanation": "Speed = Distance ÷ Time = 180 ÷ 3 = 60 mph",
        "difficulty": "easy",
    },
    {
        "id": 10,
        "type": "numerical",
        "question": "What comes next: 2, 3, 5, 8, 13, ?",
        "options": ["18", "21", "24", "27"],
        "correctAnswer": 1,
        "explanation": "This is the Fibonacci sequence: each number is the sum of the two preceding ones. 8 + 13 = 21",
        "difficulty": "medium",
    },
    # Verbal reasoning
    {
        "id": 11,
        "type": "verbal",
        "question": "Which word is most similar in meaning to 'UBIQUITOUS'?",
        "options": ["Rare", "Omnipresent", "Ancient", "Mysterious"],
        "correctAnswer": 1,
        "explanation": "Ubiquitous means existing or being everywhere at the same time, which is synonymous with omnipresent.",
        "difficulty": "hard",
    },
    {
        "id": 12,
        "type": "verbal",
        "question": "Which word does NOT belong with the others?",
        "options": ["Rectangle", "Square", "Triangle", "Circle"],
        "correctAnswer": 3,
        "explanation": "Circle is the only shape without straight sides or angles.",
        "difficulty": "easy",
    },
    {
        "id": 13,
        "type": "verbal",
        "question": "Complete the analogy: Book is to Reading as Fork is to ?",
        "options": ["Kitchen", "Eating", "Metal", "Cooking"],
        "correctAnswer": 1,
        "explanation": "A book is used for reading, just as a fork is used for eating.",
        "difficulty": "medium",
    },
    {
        "id": 14,
        "type": "verbal",
        "question": "What is the opposite of 'ZENITH'?",
        "options": ["Nadir", "Peak", "Summit", "Apex"],
        "correctAnswer": 0,
        "explanation": "Zenith means the highest point, so its opposite is nadir, which means the lowest point.",
        "difficulty": "hard",
    },
    {
        "id": 15,
        "type": "verbal",
        "question": "Which word best completes: 'The _____ student always asked thoughtful questions.'",
        "options": ["Inquisitive", "Lazy", "Quiet", "Tall"],
        "correctAnswer": 0,
        "explanation": "Inquisitive means eager to learn or know something, which fits with asking thoughtful questions.",
        "difficulty": "medium",
    },
    # Spatial reasoning
    {
        "id": 16,
        "type": "spatial",
        "question": "How many cubes are there in this 3D arrangement? (Imagine a 3×3×3 cube with the front-bottom-left cube removed)",
        "options": ["25", "26", "27", "28"],
        "correctAnswer": 1,
        "explanation": "A 3×3×3 cube has 27 cubes total. Removing one cube leaves 26 cubes.",
        "difficulty": "medium",
    },
    {
        "id": 17,
        "type": "spatial",
        "question": "If you fold a piece of paper in half twice and make one cut, how many holes will you have when you unfold it?",
        "options": ["2", "4", "6", "8"],
        "correctAnswer": 1,
        "explanation": "Folding twice creates 4 layers. One cut goes through all layers, creating 4 holes.",
        "difficulty": "medium",
    },
    {
        "id": 18,
        "type": "spatial",
        "question": "Which shape would you get if you rotated a triangle 180 degrees around its center?",
        "options": ["Square", "Circle", "Triangle", "Pentagon"],
        "correctAnswer": 2,
        "explanation": "Rotating a triangle 180 degrees around its center still results in a triangle, just upside down.",
        "difficulty": "easy",
    },
    {
        "id": 19,
        "type": "spatial",
        "question": "How many faces does a cube have?",
        "options": ["4", "6", "8", "12"],
        "correctAnswer": 1,
        "explanation": "A cube has 6 faces: top, bottom, front, back, left, and right.",
        "difficulty": "easy",
    },
    {
        "id": 20,
        "type": "spatial",
        "question": "If you look at a clock from behind (through the back), what time would it show when it's actually 3:00?",
        "options": ["9:00", "6:00", "12:00", "3:00"],
        "correctAnswer": 0,
        "explanation": "Looking at a clock from behind mirrors the image, so 3:00 would appear as 9:00.",
        "difficulty": "hard",
    },
    # Mixed
    {
        "id": 21,
        "type": "logical",
        "question": "If some doctors are teachers and all teachers are educated, then:",
        "options": ["Some doctors are educated", "All doctors are educated", "No doctors are educated", "Some educated people are doctors"],
        "correctAnswer": 0,
        "explanation": "Since some doctors are teachers and all teachers are educated, some doctors must be educated.",
        "difficulty": "medium",
    },
    {
        "id": 22,
        "type": "numerical",
        "question": "What is 15% of 200?",
        "options": ["25", "30", "35", "40"],
        "correctAnswer": 1,
        "explanation": "15% of 200 = 0.15 × 200 = 30",
        "difficulty": "easy",
    },
    {
        "id": 23,
        "type": "verbal",
        "question": "Which word is closest in meaning to 'EPHEMERAL'?",
        "options": ["Permanent", "Temporary", "Beautiful", "Ugly"],
        "correctAnswer": 1,
        "explanation": "Ephemeral means lasting for a very short time, so temporary is the closest meaning.",
        "difficulty": "hard",
    },
    {
        "id": 24,
        "type": "spatial",
        "question": "How many sides does a hexagon have?",
        "options": ["5", "6", "7", "8"],
        "correctAnswer": 1,
        "explanation": "A hexagon has 6 sides by definition (hex = six).",
        "difficulty": "easy",
    },
    {
        "id": 25,
        "type": "logical",
        "question": "Either it will rain or it will be sunny. It is not raining. Therefore:",
        "options": ["It might be sunny", "It is sunny", "It is cloudy", "Cannot determine"],
        "correctAnswer": 1,
        "explanation": "This is disjunctive syllogism. If either A or B is true, and A is false, then B must be true.",
        "difficulty": "medium",
    },
    {
        "id": 26,
        "type": "numerical",
        "question": "If a rectangle has length 8 and width 5, what is its area?",
        "options": ["13", "26", "40", "80"],
        "correctAnswer": 2,
        "explanation": "Area = length × width = 8 × 5 = 40",
        "difficulty": "easy",
    },
    {
        "id": 27,
        "type": "verbal",
        "question": "Complete: Cat is to Meow as Dog is to ?",
        "options": ["Run", "Bark", "Tail", "Pet"],
        "correctAnswer": 1,
        "explanation": "Cats meow and dogs bark - both are characteristic sounds.",
        "difficulty": "easy",
    },
    {
        "id": 28,
        "type": "spatial",
        "question": "If you rotate the letter 'b' 180 degrees, what letter do you get?",
        "options": ["d", "p", "q", "b"],
        "correctAnswer": 2,
        "explanation": "Rotating 'b' 180 degrees gives you 'q'.",
        "difficulty": "medium",
    },
    {
        "id": 29,
        "type": "logical",
        "question": "No fish are mammals. Some animals are fish. Therefore:",
        "options": ["Some animals are not mammals", "All animals are mammals", "No animals are mammals", "Some mammals are fish"],
        "correctAnswer": 0,
        "explanation": "Since some animals are fish and no fish are mammals, some animals are not mammals.",
        "difficulty": "medium",
    },
    {
        "id": 30,
        "type": "numerical",
        "question": "What is the square root of 144?",
        "options": ["11", "12", "13", "14"],
        "correctAnswer": 1,
        "explanation": "12 × 12 = 144, so √144 = 12",
        "difficulty": "easy",
    },
]


def load_builtin_questions() -> Tuple[Question, ...]:
    """Validate and return the built-in bank as Question objects."""
    return tuple(Question.model_validate(item) for item in BUILTIN_QUESTIONS)
