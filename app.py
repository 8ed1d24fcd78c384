"""Daily Sweat - Streamlit App."""

import logging
import os
from datetime import datetime
from pathlib import Path

import streamlit as st

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

from daily_sweat.errors import InvalidPlanError
from daily_sweat.memory.workout_history import WorkoutHistoryStorage
from daily_sweat.models.session_state import CompletionKind, SessionEventKind, SessionPhase
from daily_sweat.models.workout_plan import Difficulty, DifficultyFeedback, GenerateWorkoutInput, WorkoutPlan
from daily_sweat.models.workout_request import EQUIPMENT_LABELS, MUSCLE_GROUP_LABELS
from daily_sweat.session.controller import WorkoutSessionController
from daily_sweat.session.stats import format_duration
from daily_sweat.utils.gemini_langchain_client import DEFAULT_MODEL, GeminiLangChainClient
from daily_sweat.utils.prompts import SYSTEM_PROMPT
from daily_sweat.utils.tool_handlers import get_all_tools, set_history_context
from daily_sweat.utils.workout_flows import WorkoutFlows

# Page config
st.set_page_config(
    page_title="Daily Sweat",
    page_icon="💪",
    layout="centered",
    initial_sidebar_state="expanded",
)

DEFAULT_HISTORY_PATH = "~/.daily_sweat/workout_history.json"

EVENT_TOASTS = {
    SessionEventKind.EXERCISE_TIME_UP: ("⏰", "Time's up for {name}!"),
    SessionEventKind.REST_OVER: ("🔔", "Rest over. Get ready for the next exercise!"),
    SessionEventKind.WORKOUT_COMPLETE: ("🎉", "Workout complete! Well done!"),
    SessionEventKind.WORKOUT_ENDED_EARLY: ("🏁", "Your workout session has ended early."),
}


def get_setting(name: str, default=None):
    """Read a setting from Streamlit secrets, then the environment."""
    try:
        if name in st.secrets:
            return st.secrets[name]
    except Exception:
        # No secrets.toml configured
        pass
    return os.environ.get(name.upper(), default)


def initialize_session_state() -> None:
    """Initialize all session state variables."""
    if "chat_history" not in st.session_state:
        st.session_state.chat_history = []
    if "chat_client" not in st.session_state:
        st.session_state.chat_client = None
    if "flows" not in st.session_state:
        st.session_state.flows = None
    if "history" not in st.session_state:
        st.session_state.history = None
    if "current_plan" not in st.session_state:
        st.session_state.current_plan = None
    if "generator_params" not in st.session_state:
        st.session_state.generator_params = GenerateWorkoutInput(
            muscle_groups=MUSCLE_GROUP_LABELS[next(iter(MUSCLE_GROUP_LABELS))],
            available_time=30,
            equipment=EQUIPMENT_LABELS[next(iter(EQUIPMENT_LABELS))],
            difficulty=Difficulty.BEGINNER,
        )
    if "session" not in st.session_state:
        st.session_state.session = None
    if "error" not in st.session_state:
        st.session_state.error = None
    if "suggestions" not in st.session_state:
        st.session_state.suggestions = []


def initialize_services() -> None:
    """Initialize workout history and the Gemini clients."""
    if not st.session_state.history:
        history_path = get_setting("history_path", DEFAULT_HISTORY_PATH)
        st.session_state.history = WorkoutHistoryStorage(Path(history_path))
        set_history_context(st.session_state.history)

    if st.session_state.flows:
        return

    api_key = get_setting("GEMINI_API_KEY")
    if not api_key:
        logger.warning("GEMINI_API_KEY is not configured, AI features disabled")
        return

    model_name = get_setting("gemini_model", DEFAULT_MODEL)
    language = get_setting("language", "en")

    planner = GeminiLangChainClient(api_key=api_key, model_name=model_name)
    st.session_state.flows = WorkoutFlows(planner, language=language)
    st.session_state.chat_client = GeminiLangChainClient(
        api_key=api_key,
        model_name=model_name,
        system_instruction=SYSTEM_PROMPT.format(language=language),
        tools=get_all_tools(),
    )


def save_to_history(plan: WorkoutPlan) -> None:
    try:
        st.session_state.history.add(plan)
    except OSError as e:
        st.warning(f"Could not save workout to history: {e}")


def handle_generate(params: GenerateWorkoutInput) -> None:
    flows: WorkoutFlows = st.session_state.flows
    st.session_state.error = None
    try:
        with st.spinner("Generating your workout..."):
            plan = flows.generate_workout(params)
        st.session_state.current_plan = plan
        st.session_state.generator_params = params
        save_to_history(plan)
        st.toast("Workout generated! Your personalized plan is ready.", icon="✅")
    except InvalidPlanError as e:
        logger.error(f"Generated plan rejected: {e}")
        st.session_state.error = e.message
    except Exception as e:
        logger.error(f"Error generating workout: {e}", exc_info=True)
        st.session_state.error = "Failed to generate workout. Please try again."


def handle_adjust(feedback: DifficultyFeedback) -> None:
    plan: WorkoutPlan = st.session_state.current_plan
    if not plan:
        st.session_state.error = "No current workout to adjust."
        return

    st.session_state.error = None
    try:
        with st.spinner("Adjusting your workout..."):
            adjusted = st.session_state.flows.adjust_workout_difficulty(plan, feedback)
        st.session_state.current_plan = adjusted
        save_to_history(adjusted)
        st.toast(f"Difficulty perception: {feedback.value}. Plan updated.", icon="🔧")
    except InvalidPlanError as e:
        logger.error(f"Adjusted plan rejected: {e}")
        st.session_state.error = e.message
    except Exception as e:
        logger.error(f"Error adjusting workout difficulty: {e}", exc_info=True)
        st.session_state.error = "Failed to adjust workout difficulty."


def handle_translate(language: str) -> None:
    plan: WorkoutPlan = st.session_state.current_plan
    st.session_state.error = None
    try:
        with st.spinner("Translating your workout..."):
            translated = st.session_state.flows.translate_workout_plan(plan, language)
        st.session_state.current_plan = translated
        save_to_history(translated)
    except Exception as e:
        logger.error(f"Error translating workout: {e}", exc_info=True)
        st.session_state.error = "Failed to translate the workout plan."


def start_session(plan: WorkoutPlan) -> None:
    """Create a controller for the plan and switch to the session view."""
    controller = WorkoutSessionController()
    controller.start(plan)
    if controller.phase == SessionPhase.ERROR:
        st.session_state.error = controller.state.error_message
        controller.close()
        return
    st.session_state.session = controller
    st.toast("Workout started! Let's go!", icon="🏃")


def leave_session() -> None:
    controller: WorkoutSessionController = st.session_state.session
    if controller:
        controller.close()
    st.session_state.session = None


def generator_tab() -> None:
    """Workout generator: structured form or free-text description."""
    flows: WorkoutFlows = st.session_state.flows
    if not flows:
        st.info("Add GEMINI_API_KEY to Streamlit secrets to generate workouts.")
        return

    defaults: GenerateWorkoutInput = st.session_state.generator_params
    mode = st.radio("Mode", ["Form", "Describe"], horizontal=True, label_visibility="collapsed")

    if mode == "Describe":
        if st.button("💡 Inspire me", use_container_width=True):
            try:
                st.session_state.suggestions = flows.suggest_workout_descriptions()
            except Exception as e:
                logger.warning(f"Failed to load suggestions: {e}")
        for suggestion in st.session_state.suggestions:
            st.caption(f"• {suggestion}")

        with st.form("describe_form"):
            request = st.text_area(
                "Describe your workout",
                placeholder="20-min beginner HIIT, no equipment, focus legs",
            )
            submitted = st.form_submit_button("Generate Workout", type="primary", use_container_width=True)
        if submitted and request.strip():
            try:
                with st.spinner("Understanding your request..."):
                    params = flows.parse_workout_request(request).to_generate_input()
            except Exception as e:
                logger.error(f"Error parsing workout request: {e}", exc_info=True)
                st.session_state.error = "Could not understand the request. Try the form instead."
                return
            handle_generate(params)
        return

    muscle_options = list(MUSCLE_GROUP_LABELS.values())
    equipment_options = list(EQUIPMENT_LABELS.values())
    with st.form("generator_form"):
        muscle_groups = st.selectbox(
            "Muscle groups",
            muscle_options,
            index=muscle_options.index(defaults.muscle_groups) if defaults.muscle_groups in muscle_options else 0,
        )
        available_time = st.number_input(
            "Available time (minutes)", min_value=5, max_value=180, value=defaults.available_time, step=5
        )
        equipment = st.selectbox(
            "Equipment",
            equipment_options,
            index=equipment_options.index(defaults.equipment) if defaults.equipment in equipment_options else 0,
        )
        difficulty = st.selectbox(
            "Difficulty",
            list(Difficulty),
            index=list(Difficulty).index(defaults.difficulty),
            format_func=lambda d: d.value.capitalize(),
        )
        submitted = st.form_submit_button("Generate Workout", type="primary", use_container_width=True)

    if submitted:
        handle_generate(
            GenerateWorkoutInput(
                muscle_groups=muscle_groups,
                available_time=int(available_time),
                equipment=equipment,
                difficulty=difficulty,
            )
        )


def plan_view(plan: WorkoutPlan) -> None:
    """Show the current plan with start and feedback actions."""
    st.markdown(f"### 📋 {plan.name}")
    if plan.description:
        st.write(plan.description)
    st.caption(
        f"{plan.difficulty.value.capitalize()} · {plan.available_time} min · "
        f"{plan.muscle_groups} · {plan.equipment}"
    )

    for i, ex in enumerate(plan.exercises, start=1):
        with st.expander(f"{i}. {ex.name}"):
            cols = st.columns(4)
            cols[0].metric("Sets", ex.sets)
            cols[1].metric("Reps", ex.reps)
            cols[2].metric("Rest", f"{ex.rest}s")
            cols[3].metric("Duration", f"{ex.duration}s" if ex.is_timed else "-")
            if ex.description:
                st.caption(ex.description)

    if st.button("▶️ Start Workout", type="primary", use_container_width=True):
        start_session(plan)
        st.rerun()

    if st.session_state.flows:
        st.markdown("**How was this workout?**")
        cols = st.columns(3)
        for col, feedback in zip(cols, DifficultyFeedback):
            if col.button(feedback.value.capitalize(), key=f"feedback_{feedback.name}", use_container_width=True):
                handle_adjust(feedback)
                st.rerun()

        with st.expander("🌐 Translate plan"):
            language = st.text_input("Language", placeholder="es, uk, German...")
            if st.button("Translate", use_container_width=True) and language.strip():
                handle_translate(language.strip())
                st.rerun()


def history_tab() -> None:
    history: WorkoutHistoryStorage = st.session_state.history
    plans = history.load()

    if not plans:
        st.info("No workouts yet. Generate your first one!")
        return

    if st.session_state.flows and st.button("📊 Weekly insights", use_container_width=True):
        try:
            with st.spinner("Analyzing your history..."):
                insights = st.session_state.flows.weekly_insights(plans)
            st.markdown(f"#### {insights.title}")
            st.write(insights.summary)
            for suggestion in insights.suggestions:
                st.write(f"- {suggestion}")
            if insights.next_suggested_params:
                st.session_state.generator_params = insights.next_suggested_params
                st.caption("Next workout parameters were prefilled in the generator.")
        except Exception as e:
            logger.error(f"Error generating insights: {e}", exc_info=True)
            st.error("Could not generate insights right now.")

    for plan in plans:
        with st.container(border=True):
            st.write(f"**{plan.name}**")
            caption = f"Generated on {plan.generated_at:%Y-%m-%d %H:%M} · {len(plan.exercises)} exercises"
            if plan.feedback_given:
                caption += f" · Feedback: {plan.feedback_given}"
            st.caption(caption)
            col1, col2 = st.columns(2)
            if col1.button("View", key=f"view_{plan.id}", use_container_width=True):
                st.session_state.current_plan = plan
                st.session_state.generator_params = plan.generation_params
                st.toast(f'Loaded "{plan.name}" from history.')
                st.rerun()
            if col2.button("Delete", key=f"delete_{plan.id}", use_container_width=True):
                history.remove(plan.id)
                st.rerun()

    if st.button("🗑️ Clear all history", use_container_width=True):
        history.clear()
        st.rerun()


def chat_tab() -> None:
    """Fitness chat with the coach."""
    client: GeminiLangChainClient = st.session_state.chat_client
    if not client:
        st.info("Add GEMINI_API_KEY to Streamlit secrets to chat with the coach.")
        return

    if not st.session_state.chat_history:
        st.chat_message("assistant").write(
            "Hi! Ask me anything about training, nutrition or recovery."
        )
    for message in st.session_state.chat_history:
        st.chat_message(message["role"]).write(message["content"])

    user_input = st.chat_input("Ask the coach...")
    if not user_input:
        return

    st.session_state.chat_history.append({"role": "user", "content": user_input})
    if not client.chat_history:
        client.start_chat(history=st.session_state.chat_history[:-1])

    try:
        with st.spinner("Coach is thinking..."):
            response = client.send_message(user_input)
        st.session_state.chat_history.append({"role": "assistant", "content": response})
        st.rerun()
    except Exception as e:
        logger.error(f"Chat error: {e}", exc_info=True)
        st.error("Sorry, I couldn't answer that right now.")


@st.fragment(run_every=1)
def session_view() -> None:
    """Active workout. Reruns every second to drive the session timers."""
    controller: WorkoutSessionController = st.session_state.session
    if controller is None:
        return

    controller.poll()
    for event in controller.pop_events():
        icon, text = EVENT_TOASTS[event.kind]
        st.toast(text.format(name=event.exercise_name or ""), icon=icon)

    state = controller.snapshot()

    if state.phase == SessionPhase.COMPLETED:
        finished = state.completion_kind == CompletionKind.FINISHED
        st.markdown("## 🎉 Workout Finished!" if finished else "## 🏁 Workout Ended")
        st.write("Workout Complete! Well done!" if finished else "Your workout session has ended early.")
        if state.completion_stats:
            st.write(f"Total Session Time: {format_duration(state.completion_stats.total_duration_seconds)}")
            st.write(f"Estimated Kcal Burned: {state.completion_stats.estimated_energy_units}")
        if st.button("Close", type="primary", use_container_width=True):
            leave_session()
            st.rerun(scope="app")
        return

    exercise = state.current_exercise
    st.caption(f"Exercise {state.active_index + 1} of {state.exercise_count}: {exercise.name}")

    if state.phase == SessionPhase.REST:
        st.markdown("### ⏱️ Rest Timer")
        st.write("Take a breather, then hit it hard!")
        st.markdown(f"# {format_duration(state.rest_time_left)}")
        if state.rest_duration:
            st.progress(state.rest_time_left / state.rest_duration)
        col1, col2, col3 = st.columns(3)
        col1.button("Pause" if state.is_rest_timer_running else "Resume", on_click=controller.toggle_rest, use_container_width=True)
        col2.button("Reset", on_click=controller.reset_rest, use_container_width=True)
        col3.button("Skip Rest", on_click=controller.skip_rest, type="primary", use_container_width=True)
    else:
        with st.container(border=True):
            st.markdown(f"### {exercise.name}")
            cols = st.columns(3)
            cols[0].metric("Sets", exercise.sets)
            cols[1].metric("Reps", exercise.reps)
            cols[2].metric("Rest", f"{exercise.rest}s")
            if exercise.description:
                st.caption(f"ℹ️ {exercise.description}")

        if state.is_current_exercise_timed:
            st.markdown(f"# {format_duration(state.exercise_time_left)}")
            if state.exercise_time_left:
                st.button(
                    "Resume" if state.is_exercise_timer_paused else "Pause",
                    on_click=controller.toggle_exercise_pause,
                    use_container_width=True,
                )

        col1, col2 = st.columns(2)
        col1.button("◀ Previous", on_click=controller.previous, disabled=state.active_index == 0, use_container_width=True)
        next_label = "Finish Workout" if state.is_last_exercise and not exercise.rest else "Next Exercise ▶"
        col2.button(next_label, on_click=controller.advance, type="primary", use_container_width=True)

    st.button("End Workout Early", on_click=controller.end_workout, use_container_width=True)


def main_app() -> None:
    """Main application UI."""
    initialize_services()

    st.title("💪 Daily Sweat")

    with st.sidebar:
        st.markdown("### ℹ️ Information")
        st.info("Workout history is stored locally on this machine.")
        st.caption(f"Updated {datetime.now():%Y-%m-%d %H:%M}")

    if st.session_state.session is not None:
        if st.button("← Back to Workout Generator"):
            leave_session()
            st.rerun()
        session_view()
        return

    if st.session_state.error:
        st.error(st.session_state.error)

    workout_tab, history_tab_, chat_tab_ = st.tabs(["🏋️ Workout", "📜 History", "💬 Coach"])
    with workout_tab:
        generator_tab()
        if st.session_state.current_plan:
            st.markdown("---")
            plan_view(st.session_state.current_plan)
    with history_tab_:
        history_tab()
    with chat_tab_:
        chat_tab()


def main() -> None:
    """Main app entry point."""
    initialize_session_state()
    main_app()


if __name__ == "__main__":
    main()
