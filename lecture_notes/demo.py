"""Built-in sample lecture so the UI can be exercised without an API key."""

from lecture_notes.models import Flashcard, LectureRecord, QuizQuestion

SAMPLE_TRANSCRIPTION = (
    "Welcome to today's lecture on machine learning. Machine learning is a subset of "
    "artificial intelligence that enables computers to learn and make decisions without "
    "being explicitly programmed. There are three main types of machine learning: "
    "supervised learning, unsupervised learning, and reinforcement learning. Supervised "
    "learning uses labeled data to train models that can make predictions on new data. "
    "For example, we might train a model to recognize handwritten digits using thousands "
    "of examples of handwritten numbers with their correct labels. Unsupervised learning "
    "finds patterns in data without labels. Clustering algorithms like k-means can group "
    "similar data points together. Reinforcement learning involves an agent learning to "
    "make decisions through trial and error, receiving rewards or penalties for its actions."
)


def sample_lecture() -> LectureRecord:
    return LectureRecord(
        title="Introduction to Machine Learning",
        transcription=SAMPLE_TRANSCRIPTION,
        study_notes=[
            "Machine learning is a subset of AI that enables computers to learn without explicit programming",
            "Three main types: supervised, unsupervised, and reinforcement learning",
            "Supervised learning uses labeled data to train predictive models",
            "Example: handwritten digit recognition using labeled training data",
            "Unsupervised learning finds patterns in unlabeled data",
            "K-means is a clustering algorithm for grouping similar data points",
            "Reinforcement learning uses trial and error with reward/penalty feedback",
        ],
        quiz=[
            QuizQuestion(
                id=1,
                question="What is machine learning?",
                options=[
                    "A type of computer hardware",
                    "A subset of AI that enables computers to learn",
                    "A programming language",
                    "A database system",
                ],
                correct=1,
            ),
            QuizQuestion(
                id=2,
                question="How many main types of machine learning are there?",
                options=["Two", "Three", "Four", "Five"],
                correct=1,
            ),
            QuizQuestion(
                id=3,
                question="What type of learning uses labeled data?",
                options=[
                    "Unsupervised learning",
                    "Reinforcement learning",
                    "Supervised learning",
                    "Deep learning",
                ],
                correct=2,
            ),
        ],
        flashcards=[
            Flashcard(
                id=1,
                question="What is supervised learning?",
                answer="A type of machine learning that uses labeled data to train models "
                "for making predictions on new data",
            ),
            Flashcard(
                id=2,
                question="What is unsupervised learning?",
                answer="A type of machine learning that finds patterns in data without using labels",
            ),
            Flashcard(
                id=3,
                question="What is reinforcement learning?",
                answer="A type of machine learning where an agent learns through trial and "
                "error, receiving rewards or penalties for actions",
            ),
        ],
    )
