"""Built-in study plan shown before any plan has been generated."""

from .models import StudyPlan, Lesson, Sentence, Exercise


def build_demo_plan() -> StudyPlan:
    """Return a fresh copy of the demo plan (callers may append exercises)."""
    return StudyPlan(
        title="Two-week Spanish warmup",
        steps=[
            "Days 1-3: basic greetings and pronunciation.",
            "Days 4-7: daily routines and present tense verbs.",
            "Days 8-10: ordering food and travel basics.",
            "Days 11-14: past tense introduction and storytelling.",
        ],
        lessons=[
            Lesson(
                id="sounds",
                title="Saludos y Sonidos",
                topic="Greetings and Pronunciation",
                summary="Master the basics of Spanish pronunciation and learn to introduce yourself.",
                basics=[
                    "Vowels: a, e, i, o, u are always clear and short.",
                    "The letter 'ñ' sounds like 'ny' in canyon.",
                    "Greetings: Hola, Buenos días, Adiós, Hasta luego.",
                ],
                sentences=[
                    Sentence(
                        target="Hola, me llamo Elena. ¡Mucho gusto!",
                        translation="Hi, I am Elena. Nice to meet you!",
                        phonetic="oh-lah, meh yah-moh eh-leh-nah. moo-choh goos-toh",
                    ),
                    Sentence(
                        target="¿Cómo estás?",
                        translation="How are you?",
                        phonetic="koh-moh ehs-tahs",
                    ),
                    Sentence(
                        target="Soy de México y vivo en Madrid.",
                        translation="I am from Mexico and I live in Madrid.",
                        phonetic="soy deh meh-hee-koh ee bee-boh ehn mah-dreed",
                    ),
                ],
                exercises=[
                    Exercise(
                        type="cards",
                        prompt="Select 'See you later'.",
                        options=["Hasta luego", "Buenos días", "Por favor"],
                        answer="Hasta luego",
                    ),
                    Exercise(type="fill", prompt="Complete: Me ____ Elena.", answer="llamo"),
                ],
            ),
            Lesson(
                id="daily-routine",
                title="Rutina Diaria",
                topic="Daily Routines",
                summary="Describe your day and ask others about their schedule.",
                basics=[
                    "Reflexive verbs: levantarse (to get up), ducharse (to shower).",
                    "Common verbs: comer (to eat), trabajar (to work), dormir (to sleep).",
                    "Time: por la mañana, por la tarde, por la noche.",
                ],
                sentences=[
                    Sentence(
                        target="Me levanto a las siete y tomo café.",
                        translation="I get up at seven and drink coffee.",
                        phonetic="meh leh-bahn-toh ah lahs syeh-teh ee toh-moh kah-feh",
                    ),
                    Sentence(
                        target="¿Trabajas hoy o descansas?",
                        translation="Are you working today or resting?",
                        phonetic="trah-bah-hahs oy oh dehs-kahn-sahs",
                    ),
                    Sentence(
                        target="Después del trabajo voy al gimnasio.",
                        translation="After work I go to the gym.",
                        phonetic="dehs-pwehs dehl trah-bah-hoh boy ahl heem-nah-syoh",
                    ),
                ],
                exercises=[
                    Exercise(type="order", prompt="Arrange: yo - como - tarde - más.", answer="Yo como más tarde."),
                    Exercise(
                        type="cards",
                        prompt="Translate 'I sleep'.",
                        options=["Yo duermo", "Yo corro", "Yo hablo"],
                        answer="Yo duermo",
                    ),
                ],
            ),
            Lesson(
                id="service",
                title="En el Restaurante",
                topic="Ordering Food",
                summary="Order meals, ask for the bill, and be polite.",
                basics=[
                    "Polite requests: Quisiera... (I would like...), ¿Me trae...? (Can you bring me...?).",
                    "Numbers for prices.",
                    "Vocabulary: la cuenta (the bill), el menú, agua, postre.",
                ],
                sentences=[
                    Sentence(
                        target="Quisiera una mesa para dos, por favor.",
                        translation="I would like a table for two, please.",
                        phonetic="kee-syeh-rah oo-nah meh-sah pah-rah dohs, pohr fah-bohr",
                    ),
                    Sentence(
                        target="¿Cuánto cuesta esto?",
                        translation="How much does this cost?",
                        phonetic="kwahn-toh kwehs-tah ehs-toh",
                    ),
                    Sentence(
                        target="La cuenta, por favor.",
                        translation="The bill, please.",
                        phonetic="lah kwehn-tah, pohr fah-bohr",
                    ),
                ],
                exercises=[
                    Exercise(type="fill", prompt="Complete: La ____, por favor.", answer="cuenta"),
                    Exercise(type="match", prompt="Match: Agua -> Water."),
                ],
            ),
        ],
    )
