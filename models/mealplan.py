"""
Meal Plan Model

Contains the MealPlanEntry model: one (date, meal slot) cell of the
planning grid.
"""

from .base import db


class MealPlanEntry(db.Model):
    """Planned meal for a single date and slot; holds a weak recipe reference."""
    __tablename__ = 'meal_plan_entry'

    id = db.Column(db.Integer, primary_key=True)
    date = db.Column(db.String(10), nullable=False, index=True)  # YYYY-MM-DD
    meal_slot = db.Column(db.String(20), nullable=False)  # breakfast | lunch | dinner | snack
    recipe_id = db.Column(db.Integer, db.ForeignKey('recipe.id', ondelete='SET NULL'), nullable=True, index=True)
    servings = db.Column(db.Integer, nullable=True)  # None -> recipe's servings_amount
    notes = db.Column(db.String(256), nullable=True)
    recipe = db.relationship('Recipe')

    __table_args__ = (
        db.UniqueConstraint('date', 'meal_slot', name='uq_meal_plan_entry_cell'),
    )

    def __repr__(self):
        return f"<MealPlanEntry {self.id}: {self.date} {self.meal_slot}>"
